"""Field-level validator declarations.

These carry metadata only.  A schema rule classifies a validator by its
type and reads its parameters; nothing here ever inspects instance data.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from rulecast.core.exceptions import ValidatorResolutionError

if TYPE_CHECKING:
    from rulecast.validators.model import ModelValidator


@dataclass(frozen=True)
class FieldValidator:
    """Base class for a single constraint bound to one model field."""

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class NotNullValidator(FieldValidator):
    """Value must be present."""


@dataclass(frozen=True)
class NotEmptyValidator(FieldValidator):
    """Value must be present and not empty (string, collection)."""


@dataclass(frozen=True)
class LengthValidator(FieldValidator):
    """String or collection length bounds.  ``max=None`` means unbounded."""

    min: int = 0
    max: int | None = None

    @classmethod
    def min_length(cls, value: int) -> LengthValidator:
        return cls(min=value)

    @classmethod
    def max_length(cls, value: int) -> LengthValidator:
        return cls(max=value)

    @classmethod
    def exact_length(cls, value: int) -> LengthValidator:
        return cls(min=value, max=value)


@dataclass(frozen=True)
class RegularExpressionValidator(FieldValidator):
    expression: str


@dataclass(frozen=True)
class EmailValidator(FieldValidator):
    pass


class ComparisonOperator(str, Enum):
    """Operator of a comparison validator."""

    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"


@dataclass(frozen=True)
class ComparisonValidator(FieldValidator):
    operator: ComparisonOperator
    value_to_compare: Any


@dataclass(frozen=True)
class BetweenValidator(FieldValidator):
    """Range check; ``inclusive=False`` excludes both bounds."""

    from_value: Any
    to_value: Any
    inclusive: bool = True


@dataclass(frozen=True)
class PredicateValidator(FieldValidator):
    """Arbitrary predicate (``must``).  Has no schema representation."""

    predicate: Callable[[Any], bool]
    description: str = ""


# ── Composition adapters ────────────────────────────────────────────


@dataclass(frozen=True)
class ChildValidatorAdapter(FieldValidator):
    """Reference to an already-built validator whose rules are included."""

    validator: ModelValidator

    def resolves_to(self) -> ModelValidator | None:
        return self.validator


@dataclass(frozen=True)
class LazyChildValidatorAdapter(FieldValidator):
    """Reference to a validator built on demand.

    ``factory`` is a validator class or any zero-argument callable; the
    concrete validator type is only known once it has been called.
    """

    factory: Callable[[], Any]

    def resolves_to(self) -> ModelValidator | None:
        from rulecast.validators.model import ModelValidator

        resolved = self.factory()
        if resolved is None:
            return None
        if not isinstance(resolved, ModelValidator):
            raise ValidatorResolutionError(
                f"Factory {self.factory!r} returned {type(resolved).__name__}, "
                "expected a ModelValidator"
            )
        return resolved


def is_numeric(value: Any) -> bool:
    """True for int/float/Decimal operands; bools are not numbers here."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, Decimal))
