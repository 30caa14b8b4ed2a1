"""Rule matching and application engine.

Schema filter (whole model) and operation filter (single bound
parameter) share the same match/apply step::

    from rulecast.engine import SchemaRulesFilter
    result = SchemaRulesFilter(validator_factory=registry).apply(schema, Customer)
    for diagnostic in result.diagnostics:
        print(diagnostic.code, diagnostic.message)
"""

from __future__ import annotations

from rulecast.engine.diagnostics import (
    ApplyResult,
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    LazyLog,
)
from rulecast.engine.introspection import field_validators_for, included_validators_of
from rulecast.engine.operation_filter import OperationRulesFilter, apply_to_parameter
from rulecast.engine.schema_filter import SchemaRulesFilter, apply_rules

__all__ = [
    "ApplyResult",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "LazyLog",
    "field_validators_for",
    "included_validators_of",
    "apply_rules",
    "apply_to_parameter",
    "SchemaRulesFilter",
    "OperationRulesFilter",
]
