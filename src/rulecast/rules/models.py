"""Schema rule data models: the rule itself and its per-application context."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rulecast.core.config import SchemaGenerationOptions
from rulecast.core.naming import find_matching_name
from rulecast.schema.models import OpenApiSchema
from rulecast.validators.field_validators import FieldValidator

if TYPE_CHECKING:
    from rulecast.rules.catalog import RuleCatalog


@dataclass(frozen=True)
class SchemaRule:
    """A named (predicate, mutation) pair.

    ``name`` is the identity used when a caller overrides built-in rules.
    ``apply`` may raise; the engine isolates the failure.
    """

    name: str
    matches: Callable[[FieldValidator], bool]
    apply: Callable[[RuleContext], None]


@dataclass
class RuleContext:
    """Everything a rule needs for one application. Created per call, never retained."""

    schema: OpenApiSchema
    schema_type: type
    property_name: str
    field_validator: FieldValidator
    rules: RuleCatalog
    options: SchemaGenerationOptions

    @property
    def property_schema(self) -> OpenApiSchema | None:
        """The schema's property for ``property_name`` (case-reconciled)."""
        key = find_matching_name(
            self.property_name,
            self.schema.properties.keys(),
            ignore_case=True,
            ignore_separators=self.options.ignore_name_separators,
        )
        return self.schema.properties[key] if key is not None else None

    @property
    def is_array_property(self) -> bool:
        prop = self.property_schema
        return prop is not None and prop.type == "array"
