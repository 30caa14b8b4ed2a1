"""Exception hierarchy for rulecast.

The engine entry points never raise these to their callers: failures are
logged and recorded as diagnostics.  They surface from the building blocks
(catalog construction, validator loading, schema production) and are caught
at the engine boundaries.
"""

from __future__ import annotations


class RulecastError(Exception):
    """Base exception for all rulecast errors."""


class RuleCatalogError(RulecastError):
    """Raised when a rule catalog would violate its unique-name invariant."""


class ValidatorResolutionError(RulecastError):
    """Raised when a composed validator reference cannot be resolved."""


class ValidatorDefinitionError(RulecastError):
    """Raised when a declarative validator definition is malformed."""


class SchemaGenerationError(RulecastError):
    """Raised when a schema cannot be produced for a model type."""


__all__ = [
    "RulecastError",
    "RuleCatalogError",
    "ValidatorResolutionError",
    "ValidatorDefinitionError",
    "SchemaGenerationError",
]
