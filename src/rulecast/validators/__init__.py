"""Validator declarations consumed (read-only) by the schema rules engine.

Generic field validators, model validators with include composition, and
factories (``ValidatorRegistry`` in memory, ``FileValidatorFactory`` from
YAML/JSON) live here.
"""

from __future__ import annotations

from rulecast.validators.factory import IValidatorFactory, ValidatorRegistry
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
from rulecast.validators.loader import FileValidatorFactory
from rulecast.validators.model import IncludeRule, ModelValidator, PropertyRule, RuleBuilder

__all__ = [
    "FieldValidator",
    "NotNullValidator",
    "NotEmptyValidator",
    "LengthValidator",
    "RegularExpressionValidator",
    "EmailValidator",
    "ComparisonOperator",
    "ComparisonValidator",
    "BetweenValidator",
    "PredicateValidator",
    "ChildValidatorAdapter",
    "LazyChildValidatorAdapter",
    "ModelValidator",
    "PropertyRule",
    "IncludeRule",
    "RuleBuilder",
    "IValidatorFactory",
    "ValidatorRegistry",
    "FileValidatorFactory",
]
