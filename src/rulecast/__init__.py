"""rulecast: write validator-derived constraints into OpenAPI schemas.

Usage::

    from rulecast import (
        ModelValidator, ValidatorRegistry,
        PydanticSchemaProvider, SchemaRulesFilter,
    )

    class CustomerValidator(ModelValidator):
        def __init__(self) -> None:
            super().__init__(Customer)
            self.rule_for("name").not_empty().max_length(50)

    registry = ValidatorRegistry()
    registry.register(Customer, CustomerValidator)

    provider = PydanticSchemaProvider()
    schema = provider.get_schema_for_type(Customer)
    SchemaRulesFilter(validator_factory=registry).apply(schema, Customer)
    schema.to_dict()
"""

from __future__ import annotations

from rulecast.core.config import AppSettings, ObservabilityConfig, SchemaGenerationOptions
from rulecast.core.exceptions import (
    RuleCatalogError,
    RulecastError,
    SchemaGenerationError,
    ValidatorDefinitionError,
    ValidatorResolutionError,
)
from rulecast.core.logging_config import setup_logging
from rulecast.engine import (
    ApplyResult,
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    OperationRulesFilter,
    SchemaRulesFilter,
    apply_rules,
    apply_to_parameter,
)
from rulecast.rules import RuleCatalog, RuleContext, SchemaRule
from rulecast.schema import (
    ApiParameterDescription,
    OpenApiOperation,
    OpenApiParameter,
    OpenApiSchema,
    PydanticSchemaProvider,
    SchemaRepository,
)
from rulecast.validators import FileValidatorFactory, ModelValidator, ValidatorRegistry

__all__ = [
    # Config / logging / errors
    "AppSettings",
    "SchemaGenerationOptions",
    "ObservabilityConfig",
    "setup_logging",
    "RulecastError",
    "RuleCatalogError",
    "ValidatorResolutionError",
    "ValidatorDefinitionError",
    "SchemaGenerationError",
    # Rules
    "SchemaRule",
    "RuleContext",
    "RuleCatalog",
    # Engine
    "apply_rules",
    "apply_to_parameter",
    "SchemaRulesFilter",
    "OperationRulesFilter",
    "ApplyResult",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    # Schema
    "OpenApiSchema",
    "OpenApiParameter",
    "OpenApiOperation",
    "ApiParameterDescription",
    "PydanticSchemaProvider",
    "SchemaRepository",
    # Validators
    "ModelValidator",
    "ValidatorRegistry",
    "FileValidatorFactory",
]
