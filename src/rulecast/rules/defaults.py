"""Built-in schema rules.

Order matters only when two rules write the same attribute for the same
validator (later rules win).  The default order is::

    Required, NotEmpty, Length, Pattern, Email, Comparison, Between
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from rulecast.core.exceptions import RulecastError
from rulecast.rules.models import RuleContext, SchemaRule
from rulecast.schema.models import OpenApiSchema
from rulecast.validators.field_validators import (
    BetweenValidator,
    ComparisonOperator,
    ComparisonValidator,
    EmailValidator,
    FieldValidator,
    LengthValidator,
    NotEmptyValidator,
    NotNullValidator,
    RegularExpressionValidator,
    is_numeric,
)

REQUIRED = "Required"
NOT_EMPTY = "NotEmpty"
LENGTH = "Length"
PATTERN = "Pattern"
EMAIL = "Email"
COMPARISON = "Comparison"
BETWEEN = "Between"

DEFAULT_RULE_NAMES = (REQUIRED, NOT_EMPTY, LENGTH, PATTERN, EMAIL, COMPARISON, BETWEEN)


def _property(context: RuleContext) -> OpenApiSchema:
    prop = context.property_schema
    if prop is None:
        raise RulecastError(
            f"Property {context.property_name!r} not found in schema for {context.schema_type.__name__}"
        )
    return prop


def _as_number(value: Any) -> int | float:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


# ── Required ────────────────────────────────────────────────────────


def _matches_required(validator: FieldValidator) -> bool:
    return isinstance(validator, (NotNullValidator, NotEmptyValidator))


def _apply_required(context: RuleContext) -> None:
    prop = _property(context)
    if context.property_name not in context.schema.required:
        context.schema.required.append(context.property_name)
    prop.nullable = False


# ── NotEmpty ────────────────────────────────────────────────────────


def _matches_not_empty(validator: FieldValidator) -> bool:
    return isinstance(validator, NotEmptyValidator)


def _apply_not_empty(context: RuleContext) -> None:
    prop = _property(context)
    if prop.type == "array":
        prop.min_items = max(prop.min_items or 0, 1)
    elif prop.type == "string":
        prop.min_length = max(prop.min_length or 0, 1)
    prop.nullable = False


# ── Length ──────────────────────────────────────────────────────────


def _matches_length(validator: FieldValidator) -> bool:
    return isinstance(validator, LengthValidator)


def _apply_length(context: RuleContext) -> None:
    validator = context.field_validator
    assert isinstance(validator, LengthValidator)
    prop = _property(context)
    is_array = prop.type == "array"

    if validator.max is not None and validator.max > 0:
        if is_array:
            prop.max_items = validator.max
        else:
            prop.max_length = validator.max

    if validator.min > 0:
        if is_array:
            prop.min_items = validator.min
        else:
            prop.min_length = validator.min
        if context.options.set_not_nullable_if_min_length_greater_than_zero:
            prop.nullable = False


# ── Pattern ─────────────────────────────────────────────────────────


def _matches_pattern(validator: FieldValidator) -> bool:
    return isinstance(validator, RegularExpressionValidator)


def _apply_pattern(context: RuleContext) -> None:
    validator = context.field_validator
    assert isinstance(validator, RegularExpressionValidator)
    prop = _property(context)
    expression = validator.expression

    if prop.pattern is None or prop.pattern == expression:
        prop.pattern = expression
        return

    if context.options.use_all_of_for_multiple_rules:
        if not any(sub.pattern == expression for sub in prop.all_of):
            prop.all_of.append(OpenApiSchema(pattern=expression))
    else:
        prop.pattern = expression


# ── Email ───────────────────────────────────────────────────────────


def _matches_email(validator: FieldValidator) -> bool:
    return isinstance(validator, EmailValidator)


def _apply_email(context: RuleContext) -> None:
    _property(context).format = "email"


# ── Comparison ──────────────────────────────────────────────────────

_LOWER_BOUND = {
    ComparisonOperator.GREATER_THAN: True,
    ComparisonOperator.GREATER_THAN_OR_EQUAL: False,
}
_UPPER_BOUND = {
    ComparisonOperator.LESS_THAN: True,
    ComparisonOperator.LESS_THAN_OR_EQUAL: False,
}


def _matches_comparison(validator: FieldValidator) -> bool:
    return (
        isinstance(validator, ComparisonValidator)
        and (validator.operator in _LOWER_BOUND or validator.operator in _UPPER_BOUND)
        and is_numeric(validator.value_to_compare)
    )


def _apply_comparison(context: RuleContext) -> None:
    validator = context.field_validator
    assert isinstance(validator, ComparisonValidator)
    prop = _property(context)
    value = _as_number(validator.value_to_compare)

    if validator.operator in _LOWER_BOUND:
        prop.minimum = value
        prop.exclusive_minimum = _LOWER_BOUND[validator.operator]
    else:
        prop.maximum = value
        prop.exclusive_maximum = _UPPER_BOUND[validator.operator]


# ── Between ─────────────────────────────────────────────────────────


def _matches_between(validator: FieldValidator) -> bool:
    return (
        isinstance(validator, BetweenValidator)
        and is_numeric(validator.from_value)
        and is_numeric(validator.to_value)
    )


def _apply_between(context: RuleContext) -> None:
    validator = context.field_validator
    assert isinstance(validator, BetweenValidator)
    prop = _property(context)
    prop.minimum = _as_number(validator.from_value)
    prop.maximum = _as_number(validator.to_value)
    prop.exclusive_minimum = not validator.inclusive
    prop.exclusive_maximum = not validator.inclusive


def build_default_rules() -> list[SchemaRule]:
    """Return the built-in rules, in application order."""
    return [
        SchemaRule(REQUIRED, _matches_required, _apply_required),
        SchemaRule(NOT_EMPTY, _matches_not_empty, _apply_not_empty),
        SchemaRule(LENGTH, _matches_length, _apply_length),
        SchemaRule(PATTERN, _matches_pattern, _apply_pattern),
        SchemaRule(EMAIL, _matches_email, _apply_email),
        SchemaRule(COMPARISON, _matches_comparison, _apply_comparison),
        SchemaRule(BETWEEN, _matches_between, _apply_between),
    ]
