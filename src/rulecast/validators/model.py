"""Model-level validators: property rules, include rules and a fluent builder.

Usage::

    class AddressValidator(ModelValidator):
        def __init__(self) -> None:
            super().__init__(Address)
            self.rule_for("zip_code").not_empty().matches(r"^\\d{5}$")

    class CustomerValidator(ModelValidator):
        def __init__(self) -> None:
            super().__init__(Customer)
            self.rule_for("name").not_empty().max_length(50)
            self.rule_for("age").inclusive_between(18, 130)
            self.include(AddressValidator)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from rulecast.validators.field_validators import (
    BetweenValidator,
    ChildValidatorAdapter,
    ComparisonOperator,
    ComparisonValidator,
    EmailValidator,
    FieldValidator,
    LazyChildValidatorAdapter,
    LengthValidator,
    NotEmptyValidator,
    NotNullValidator,
    PredicateValidator,
    RegularExpressionValidator,
)

Condition = Callable[[Any], bool]


@dataclass
class PropertyRule:
    """Validators attached to one named property."""

    property_name: str
    validators: list[FieldValidator] = field(default_factory=list)
    condition: Condition | None = None

    def has_no_condition(self) -> bool:
        return self.condition is None


@dataclass
class IncludeRule:
    """Merges another validator's rules into the owning validator."""

    adapter: FieldValidator
    condition: Condition | None = None

    def has_no_condition(self) -> bool:
        return self.condition is None


ValidationRule = Union[PropertyRule, IncludeRule]


class RuleBuilder:
    """Fluent API returned by :meth:`ModelValidator.rule_for`."""

    def __init__(self, rule: PropertyRule) -> None:
        self._rule = rule

    @property
    def rule(self) -> PropertyRule:
        return self._rule

    def set_validator(self, validator: FieldValidator) -> RuleBuilder:
        self._rule.validators.append(validator)
        return self

    def not_null(self) -> RuleBuilder:
        return self.set_validator(NotNullValidator())

    def not_empty(self) -> RuleBuilder:
        return self.set_validator(NotEmptyValidator())

    def length(self, min: int, max: int | None = None) -> RuleBuilder:
        return self.set_validator(LengthValidator(min=min, max=max))

    def min_length(self, value: int) -> RuleBuilder:
        return self.set_validator(LengthValidator.min_length(value))

    def max_length(self, value: int) -> RuleBuilder:
        return self.set_validator(LengthValidator.max_length(value))

    def exact_length(self, value: int) -> RuleBuilder:
        return self.set_validator(LengthValidator.exact_length(value))

    def matches(self, expression: str) -> RuleBuilder:
        return self.set_validator(RegularExpressionValidator(expression))

    def email_address(self) -> RuleBuilder:
        return self.set_validator(EmailValidator())

    def greater_than(self, value: Any) -> RuleBuilder:
        return self.set_validator(ComparisonValidator(ComparisonOperator.GREATER_THAN, value))

    def greater_than_or_equal_to(self, value: Any) -> RuleBuilder:
        return self.set_validator(ComparisonValidator(ComparisonOperator.GREATER_THAN_OR_EQUAL, value))

    def less_than(self, value: Any) -> RuleBuilder:
        return self.set_validator(ComparisonValidator(ComparisonOperator.LESS_THAN, value))

    def less_than_or_equal_to(self, value: Any) -> RuleBuilder:
        return self.set_validator(ComparisonValidator(ComparisonOperator.LESS_THAN_OR_EQUAL, value))

    def equal(self, value: Any) -> RuleBuilder:
        return self.set_validator(ComparisonValidator(ComparisonOperator.EQUAL, value))

    def inclusive_between(self, from_value: Any, to_value: Any) -> RuleBuilder:
        return self.set_validator(BetweenValidator(from_value, to_value, inclusive=True))

    def exclusive_between(self, from_value: Any, to_value: Any) -> RuleBuilder:
        return self.set_validator(BetweenValidator(from_value, to_value, inclusive=False))

    def must(self, predicate: Condition, description: str = "") -> RuleBuilder:
        return self.set_validator(PredicateValidator(predicate, description))

    def when(self, condition: Condition) -> RuleBuilder:
        """Attach a runtime condition to the whole property rule."""
        self._rule.condition = condition
        return self


class ModelValidator:
    """Ordered set of property and include rules for one model type.

    Subclass and declare rules in ``__init__``, or build an instance
    directly and call :meth:`rule_for` / :meth:`include` on it.
    """

    def __init__(self, model_type: type | None = None) -> None:
        self.model_type = model_type
        self._rules: list[ValidationRule] = []

    def rule_for(self, property_name: str) -> RuleBuilder:
        rule = PropertyRule(property_name=property_name)
        self._rules.append(rule)
        return RuleBuilder(rule)

    def include(
        self,
        validator: ModelValidator | Callable[[], Any],
        *,
        when: Condition | None = None,
    ) -> IncludeRule:
        """Include another validator's rules.

        Accepts a built validator, a validator class, or a factory callable.
        Classes and factories are only instantiated when the include is
        resolved.
        """
        if isinstance(validator, ModelValidator):
            adapter: FieldValidator = ChildValidatorAdapter(validator)
        elif callable(validator):
            adapter = LazyChildValidatorAdapter(validator)
        else:
            raise TypeError(
                f"include() expects a ModelValidator or a factory, got {type(validator).__name__}"
            )
        rule = IncludeRule(adapter=adapter, condition=when)
        self._rules.append(rule)
        return rule

    @property
    def rules(self) -> tuple[ValidationRule, ...]:
        return tuple(self._rules)

    def property_rules(self) -> list[PropertyRule]:
        return [r for r in self._rules if isinstance(r, PropertyRule)]

    def include_rules(self) -> list[IncludeRule]:
        return [r for r in self._rules if isinstance(r, IncludeRule)]

    def __iter__(self) -> Iterator[ValidationRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        target = self.model_type.__name__ if self.model_type else "?"
        return f"{type(self).__name__}({target}, rules={len(self._rules)})"
