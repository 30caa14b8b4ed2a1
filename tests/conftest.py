"""Shared fixtures for rulecast tests."""

from __future__ import annotations

import pytest

from rulecast.core.config import SchemaGenerationOptions
from rulecast.rules.catalog import RuleCatalog
from rulecast.schema.models import OpenApiSchema
from tests.fakes.fake_schema_provider import make_object_schema


@pytest.fixture()
def options() -> SchemaGenerationOptions:
    """Default generation options, independent of RULECAST_* env vars."""
    return SchemaGenerationOptions(
        property_naming="as_is",
        ignore_name_separators=True,
        set_not_nullable_if_min_length_greater_than_zero=True,
        use_all_of_for_multiple_rules=True,
    )


@pytest.fixture()
def default_catalog() -> RuleCatalog:
    return RuleCatalog.build_default()


@pytest.fixture()
def customer_schema() -> OpenApiSchema:
    """Hand-built schema mirroring ``sample_models.Customer``."""
    return make_object_schema(
        required=["name"],
        name="string",
        email="string",
        age="integer",
        tags="array",
        address="object",
    )
