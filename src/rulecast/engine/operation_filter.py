"""Parameter-binding adapter: apply validation rules to operation parameters.

Parameters bound from a model's properties (e.g. a query model flattened
into individual query parameters) get the constraints of the matching
property of that model's schema.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable

from rulecast.core.config import SchemaGenerationOptions
from rulecast.core.naming import find_matching_name, names_match, to_lower_camel_case
from rulecast.engine.diagnostics import ApplyResult, DiagnosticCode, DiagnosticLevel
from rulecast.engine.schema_filter import apply_rules
from rulecast.rules.catalog import RuleCatalog
from rulecast.rules.models import SchemaRule
from rulecast.schema.models import ApiParameterDescription, OpenApiOperation, OpenApiParameter
from rulecast.schema.provider import ISchemaProvider
from rulecast.validators.factory import IValidatorFactory
from rulecast.validators.model import ModelValidator

log = logging.getLogger(__name__)

# Copied from the property schema onto the parameter schema
PARAMETER_SCHEMA_ATTRIBUTES = (
    "min_length",
    "max_length",
    "nullable",
    "pattern",
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "all_of",
)


def apply_to_parameter(
    parameter: OpenApiParameter,
    schema_type: type,
    field_name: str,
    validator: ModelValidator,
    rules: RuleCatalog,
    *,
    schema_provider: ISchemaProvider,
    options: SchemaGenerationOptions | None = None,
) -> ApplyResult:
    """Apply rules for one property of ``schema_type`` and project them onto ``parameter``.

    The parameter is only updated once everything succeeded; exceptions
    propagate to the caller with ``parameter`` untouched.
    """
    options = options or SchemaGenerationOptions()
    schema = schema_provider.get_schema_for_type(schema_type)
    if not schema.properties:
        return ApplyResult(model_type=schema_type.__name__)

    property_name = (
        find_matching_name(field_name, schema.properties, ignore_case=True, ignore_separators=True)
        or field_name
    )

    result = apply_rules(
        schema,
        schema_type,
        validator,
        rules,
        options=options,
        property_names=[property_name],
    )

    staged = parameter.model_copy(deep=True)

    is_required = any(
        names_match(property_name, name, ignore_case=True, ignore_separators=True) for name in schema.required
    )
    # Path parameters are always required
    staged.required = is_required or staged.location == "path"

    if staged.schema_ is not None:
        prop = schema.properties.get(to_lower_camel_case(property_name)) or schema.properties.get(property_name)
        if prop is not None:
            for attr in PARAMETER_SCHEMA_ATTRIBUTES:
                setattr(staged.schema_, attr, copy.deepcopy(getattr(prop, attr)))

    parameter.required = staged.required
    parameter.schema_ = staged.schema_
    return result


class OperationRulesFilter:
    """Applies validation rules to every parameter of an operation.

    Args:
        schema_provider: Produces the schema of a parameter's container model.
        validator_factory: Validator lookup; None disables the filter with a warning.
        rules: Extra rules; a rule named like a built-in replaces it.
        options: Generation conventions.
    """

    def __init__(
        self,
        schema_provider: ISchemaProvider,
        validator_factory: IValidatorFactory | None = None,
        rules: Iterable[SchemaRule] | None = None,
        options: SchemaGenerationOptions | None = None,
    ) -> None:
        self._schema_provider = schema_provider
        self._validator_factory = validator_factory
        self._options = options or SchemaGenerationOptions()
        self._rules = RuleCatalog.build_default().override(rules)

    @property
    def rules(self) -> RuleCatalog:
        return self._rules

    def apply(
        self,
        operation: OpenApiOperation,
        parameter_descriptions: Iterable[ApiParameterDescription],
    ) -> ApplyResult:
        """Annotate ``operation.parameters`` in place.  Never raises."""
        operation_id = operation.operation_id or operation.path
        result = ApplyResult()
        try:
            self._apply_internal(operation, list(parameter_descriptions), operation_id, result)
        except Exception:
            log.warning("Error on apply rules for operation '%s'", operation_id, exc_info=True)
            result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.OPERATION_FAILED,
                f"Error on apply rules for operation '{operation_id}'",
            )
        return result

    def _apply_internal(
        self,
        operation: OpenApiOperation,
        descriptions: list[ApiParameterDescription],
        operation_id: str,
        result: ApplyResult,
    ) -> None:
        if not operation.parameters:
            return

        if self._validator_factory is None:
            log.warning("Validator factory is not configured; validation rules are not applied")
            result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.FACTORY_MISSING,
                "Validator factory is not configured",
            )
            return

        for parameter in operation.parameters:
            description = next(
                (d for d in descriptions if names_match(d.name, parameter.name, ignore_case=True)),
                None,
            )
            if description is None or description.container_type is None:
                continue

            container_type = description.container_type
            try:
                validator = self._validator_factory.get_validator(container_type)
                if validator is None:
                    continue
                result.merge(
                    apply_to_parameter(
                        parameter,
                        container_type,
                        parameter.name,
                        validator,
                        self._rules,
                        schema_provider=self._schema_provider,
                        options=self._options,
                    )
                )
            except Exception:
                log.warning(
                    "Error on apply rules for operation '%s' parameter '%s'",
                    operation_id,
                    parameter.name,
                    exc_info=True,
                )
                result.add(
                    DiagnosticLevel.WARNING,
                    DiagnosticCode.OPERATION_FAILED,
                    f"Error on apply rules for operation '{operation_id}' parameter '{parameter.name}'",
                    model_type=container_type.__name__,
                    property_name=parameter.name,
                )
