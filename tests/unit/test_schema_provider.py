"""Tests for PydanticSchemaProvider and SchemaRepository."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from rulecast.core.config import SchemaGenerationOptions
from rulecast.core.exceptions import SchemaGenerationError
from rulecast.schema.models import OpenApiSchema
from rulecast.schema.provider import ISchemaProvider, PydanticSchemaProvider, SchemaRepository
from tests.fakes.fake_schema_provider import FakeSchemaProvider
from tests.fakes.sample_models import Customer, CustomerQuery


class Bounded(BaseModel):
    count: int = Field(gt=0, le=10)


class NotAModel:
    pass


class TestPydanticSchemaProvider:
    def test_customer_schema(self) -> None:
        schema = PydanticSchemaProvider().get_schema_for_type(Customer)

        assert schema.type == "object"
        assert schema.required == ["name"]
        assert set(schema.properties) == {"name", "email", "age", "tags", "address"}
        assert schema.properties["email"].type == "string"
        assert schema.properties["email"].nullable is True
        assert schema.properties["tags"].type == "array"
        assert schema.properties["tags"].items is not None

    def test_nested_model_registered_and_referenced(self) -> None:
        provider = PydanticSchemaProvider()

        schema = provider.get_schema_for_type(Customer)

        address = schema.properties["address"]
        assert address.ref == "#/components/schemas/Address"
        assert address.nullable is True
        assert provider.repository.has("Address")
        assert provider.repository.schema_ids() == ["Address", "Customer"]

    def test_same_instance_returned(self) -> None:
        provider = PydanticSchemaProvider()

        first = provider.get_schema_for_type(Customer)
        first.properties["name"].max_length = 7

        assert provider.get_schema_for_type(Customer) is first
        assert provider.get_schema_for_type(Customer).properties["name"].max_length == 7

    def test_field_constraints_converted(self) -> None:
        schema = PydanticSchemaProvider().get_schema_for_type(Bounded)

        count = schema.properties["count"]
        assert (count.minimum, count.exclusive_minimum) == (0, True)
        assert count.maximum == 10

    def test_camel_case_naming(self) -> None:
        provider = PydanticSchemaProvider(options=SchemaGenerationOptions(property_naming="camel_case"))

        schema = provider.get_schema_for_type(CustomerQuery)

        assert set(schema.properties) == {"searchText", "page", "pageSize"}

    def test_custom_schema_id(self) -> None:
        provider = PydanticSchemaProvider(schema_id_selector=lambda t: f"v1.{t.__name__}")

        provider.get_schema_for_type(CustomerQuery)

        assert provider.repository.has("v1.CustomerQuery")

    def test_unsupported_type(self) -> None:
        with pytest.raises(SchemaGenerationError, match="NotAModel"):
            PydanticSchemaProvider().get_schema_for_type(NotAModel)

    def test_satisfies_protocol(self) -> None:
        assert isinstance(PydanticSchemaProvider(), ISchemaProvider)
        assert isinstance(FakeSchemaProvider(), ISchemaProvider)


class TestSchemaRepository:
    def test_add_get(self) -> None:
        repository = SchemaRepository()
        schema = OpenApiSchema(type="object")

        repository.add("Thing", schema)

        assert repository.get("Thing") is schema
        assert repository.get("Other") is None
        assert repository.to_dict() == {"Thing": {"type": "object"}}
