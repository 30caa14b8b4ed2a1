"""Schema mutation engine: apply a rule catalog to a schema using a model's validators.

Every failure below the entry points is isolated and recorded; callers get
an :class:`ApplyResult` and never an exception.

Usage::

    schema_filter = SchemaRulesFilter(validator_factory=registry)
    schema = provider.get_schema_for_type(Customer)
    result = schema_filter.apply(schema, Customer)
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

from rulecast.core.config import SchemaGenerationOptions
from rulecast.engine.diagnostics import ApplyResult, DiagnosticCode, DiagnosticLevel, LazyLog
from rulecast.engine.introspection import field_validators_for, included_validators_of
from rulecast.rules.catalog import RuleCatalog
from rulecast.rules.models import RuleContext, SchemaRule
from rulecast.schema.models import OpenApiSchema
from rulecast.validators.factory import IValidatorFactory
from rulecast.validators.field_validators import FieldValidator
from rulecast.validators.model import ModelValidator

log = logging.getLogger(__name__)

# Include chains deeper than this are cut even without a detected revisit
# (factories that build a fresh validator on every call).
MAX_INCLUDE_DEPTH = 32


def apply_rules(
    schema: OpenApiSchema,
    schema_type: type,
    validator: ModelValidator | None,
    rules: RuleCatalog,
    *,
    options: SchemaGenerationOptions | None = None,
    property_names: Iterable[str] | None = None,
) -> ApplyResult:
    """Apply ``rules`` to ``schema`` for every property matched by ``validator``.

    Args:
        schema: Schema to mutate in place.
        schema_type: Model type the schema describes (for context and logs).
        validator: The model's validator; None logs one warning and returns.
        rules: Catalog to walk for every field validator.
        options: Generation conventions; defaults when omitted.
        property_names: Restrict processing to these schema properties.

    Returns:
        The rules applied and any diagnostics, including those of included
        validators flattened into the same schema.
    """
    type_name = _type_name(schema_type)
    result = ApplyResult(model_type=type_name)

    if validator is None:
        log.warning("No validator registered for type '%s'", type_name)
        result.add(
            DiagnosticLevel.WARNING,
            DiagnosticCode.VALIDATOR_MISSING,
            f"No validator registered for type '{type_name}'",
        )
        return result

    run = _ApplyRun(
        schema=schema,
        schema_type=schema_type,
        rules=rules,
        options=options or SchemaGenerationOptions(),
        property_names=list(property_names) if property_names is not None else None,
        result=result,
    )
    run.apply(validator, depth=0)
    return result


class _ApplyRun:
    """State of a single apply call: lazy log, visited validators, result."""

    def __init__(
        self,
        *,
        schema: OpenApiSchema,
        schema_type: type,
        rules: RuleCatalog,
        options: SchemaGenerationOptions,
        property_names: list[str] | None,
        result: ApplyResult,
    ) -> None:
        self.schema = schema
        self.schema_type = schema_type
        self.type_name = _type_name(schema_type)
        self.rules = rules
        self.options = options
        self.property_names = property_names
        self.result = result
        # Holds the validators themselves so id()-based keys stay unique
        self.visited: dict[Hashable, ModelValidator] = {}
        self.lazy_log = LazyLog(
            log,
            lambda logger: logger.debug("Applying validation rules to schema for type '%s'", self.type_name),
        )

    def apply(self, validator: ModelValidator, *, depth: int) -> None:
        key = validator_identity(validator)
        if key in self.visited:
            log.debug("Validator %r already applied for type '%s', skipping", validator, self.type_name)
            self.result.add(
                DiagnosticLevel.DEBUG,
                DiagnosticCode.INCLUDE_REVISITED,
                f"Validator {validator!r} already applied",
            )
            return
        if depth > MAX_INCLUDE_DEPTH:
            log.warning(
                "Include depth %d exceeded for type '%s', skipping %r",
                MAX_INCLUDE_DEPTH,
                self.type_name,
                validator,
            )
            self.result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.INCLUDE_DEPTH_EXCEEDED,
                f"Include depth {MAX_INCLUDE_DEPTH} exceeded at {validator!r}",
            )
            return
        self.visited[key] = validator

        self._apply_to_properties(validator)

        try:
            included = included_validators_of(validator, result=self.result)
        except Exception:
            log.warning("Applying included rules for type '%s' failed", self.type_name, exc_info=True)
            self.result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.INCLUDE_FAILED,
                f"Applying included rules for type '{self.type_name}' failed",
            )
            return

        for included_validator in included:
            try:
                self.apply(included_validator, depth=depth + 1)
            except Exception:
                log.warning(
                    "Applying included validator %r for type '%s' failed",
                    included_validator,
                    self.type_name,
                    exc_info=True,
                )
                self.result.add(
                    DiagnosticLevel.WARNING,
                    DiagnosticCode.INCLUDE_FAILED,
                    f"Applying included validator {included_validator!r} failed",
                )

    def _apply_to_properties(self, validator: ModelValidator) -> None:
        names = self.property_names if self.property_names is not None else list(self.schema.properties)

        for property_name in names:
            field_validators = field_validators_for(
                validator,
                property_name,
                ignore_case=True,
                ignore_separators=self.options.ignore_name_separators,
            )
            for field_validator in field_validators:
                for rule in self.rules:
                    self._apply_rule(rule, property_name, field_validator)

    def _apply_rule(self, rule: SchemaRule, property_name: str, field_validator: FieldValidator) -> None:
        try:
            if not rule.matches(field_validator):
                return
            self.lazy_log.log_once()
            rule.apply(
                RuleContext(
                    schema=self.schema,
                    schema_type=self.schema_type,
                    property_name=property_name,
                    field_validator=field_validator,
                    rules=self.rules,
                    options=self.options,
                )
            )
        except Exception:
            log.warning(
                "Error on apply rule '%s' for property '%s.%s'",
                rule.name,
                self.type_name,
                property_name,
                exc_info=True,
            )
            self.result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.RULE_FAILED,
                f"Error on apply rule '{rule.name}' for property '{self.type_name}.{property_name}'",
                property_name=property_name,
                rule_name=rule.name,
            )
            return

        log.debug("Rule '%s' applied for property '%s.%s'", rule.name, self.type_name, property_name)
        self.result.applied.append((rule.name, property_name))


class SchemaRulesFilter:
    """Hosting-side entry point: looks up the validator, then applies rules.

    Args:
        validator_factory: Validator lookup; None disables the filter with a warning.
        rules: Extra rules; a rule named like a built-in replaces it.
        options: Generation conventions.
    """

    def __init__(
        self,
        validator_factory: IValidatorFactory | None = None,
        rules: Iterable[SchemaRule] | None = None,
        options: SchemaGenerationOptions | None = None,
    ) -> None:
        self._validator_factory = validator_factory
        self._options = options or SchemaGenerationOptions()
        self._rules = RuleCatalog.build_default().override(rules)

    @property
    def rules(self) -> RuleCatalog:
        return self._rules

    @property
    def options(self) -> SchemaGenerationOptions:
        return self._options

    def apply(self, schema: OpenApiSchema, model_type: type) -> ApplyResult:
        type_name = _type_name(model_type)

        if self._validator_factory is None:
            log.warning("Validator factory is not configured; validation rules are not applied")
            result = ApplyResult(model_type=type_name)
            result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.FACTORY_MISSING,
                "Validator factory is not configured",
            )
            return result

        try:
            validator = self._validator_factory.get_validator(model_type)
        except Exception:
            log.warning("get_validator for type '%s' failed", type_name, exc_info=True)
            result = ApplyResult(model_type=type_name)
            result.add(
                DiagnosticLevel.WARNING,
                DiagnosticCode.FACTORY_FAILED,
                f"get_validator for type '{type_name}' failed",
            )
            return result

        return apply_rules(schema, model_type, validator, self._rules, options=self._options)


def validator_identity(validator: ModelValidator) -> Hashable:
    """Key used to detect revisits while walking includes.

    Two instances of the same class may carry different rules (subclasses
    can take constructor arguments), so only the instance itself counts.
    """
    return id(validator)


def _type_name(schema_type: type) -> str:
    return getattr(schema_type, "__name__", repr(schema_type))
