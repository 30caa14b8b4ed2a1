"""Integration tests: pydantic schemas + registered validators + both filters."""

from __future__ import annotations

from pathlib import Path

import pytest

from rulecast.core.config import SchemaGenerationOptions
from rulecast.engine.operation_filter import OperationRulesFilter
from rulecast.engine.schema_filter import SchemaRulesFilter
from rulecast.schema.models import ApiParameterDescription, OpenApiOperation, OpenApiParameter, OpenApiSchema
from rulecast.schema.provider import PydanticSchemaProvider
from rulecast.validators.factory import ValidatorRegistry
from rulecast.validators.loader import FileValidatorFactory
from tests.fakes.sample_models import (
    Address,
    AddressValidator,
    Customer,
    CustomerQuery,
    CustomerQueryValidator,
    CustomerValidator,
)


@pytest.fixture()
def registry() -> ValidatorRegistry:
    registry = ValidatorRegistry()
    registry.register(Customer, CustomerValidator)
    registry.register(Address, AddressValidator)
    registry.register(CustomerQuery, CustomerQueryValidator)
    return registry


class TestComponentSchemas:
    def test_customer_and_nested_address(self, registry: ValidatorRegistry) -> None:
        provider = PydanticSchemaProvider()
        schema_filter = SchemaRulesFilter(validator_factory=registry)

        customer = provider.get_schema_for_type(Customer)
        customer_result = schema_filter.apply(customer, Customer)
        address = provider.repository.get("Address")
        assert address is not None
        address_result = schema_filter.apply(address, Address)

        document = provider.repository.to_dict()
        name = document["Customer"]["properties"]["name"]
        assert name["minLength"] == 1
        assert name["maxLength"] == 50
        assert name["nullable"] is False
        assert document["Customer"]["properties"]["email"]["format"] == "email"
        age = document["Customer"]["properties"]["age"]
        assert (age["minimum"], age["maximum"]) == (18, 130)
        assert age["exclusiveMinimum"] is False
        tags = document["Customer"]["properties"]["tags"]
        assert (tags["minItems"], tags["maxItems"]) == (1, 5)
        assert document["Customer"]["required"] == ["name"]

        assert document["Address"]["properties"]["zip_code"]["pattern"] == r"^\d{5}$"
        assert document["Address"]["properties"]["street"]["maxLength"] == 100
        assert not customer_result.has_warnings()
        assert not address_result.has_warnings()

    def test_untouched_without_validator(self) -> None:
        provider = PydanticSchemaProvider()
        schema = provider.get_schema_for_type(Customer)
        before = schema.model_dump()

        result = SchemaRulesFilter(validator_factory=ValidatorRegistry()).apply(schema, Customer)

        assert schema.model_dump() == before
        assert result.warning_count == 1

    def test_camel_case_schema(self, registry: ValidatorRegistry) -> None:
        options = SchemaGenerationOptions(property_naming="camel_case")
        provider = PydanticSchemaProvider(options=options)
        schema = provider.get_schema_for_type(Address)

        SchemaRulesFilter(validator_factory=registry, options=options).apply(schema, Address)

        assert schema.properties["zipCode"].pattern == r"^\d{5}$"
        assert schema.required == ["street", "zipCode"]


class TestQueryParameters:
    def test_query_model_parameters(self, registry: ValidatorRegistry) -> None:
        options = SchemaGenerationOptions(property_naming="camel_case")
        provider = PydanticSchemaProvider(options=options)
        operation = OpenApiOperation(
            operation_id="searchCustomers",
            path="/customers",
            parameters=[
                OpenApiParameter(name="searchText", schema_=OpenApiSchema(type="string")),
                OpenApiParameter(name="page", schema_=OpenApiSchema(type="integer")),
                OpenApiParameter(name="pageSize", schema_=OpenApiSchema(type="integer")),
            ],
        )
        descriptions = [
            ApiParameterDescription(name=name, container_type=CustomerQuery)
            for name in ("searchText", "page", "pageSize")
        ]

        result = OperationRulesFilter(provider, registry, options=options).apply(operation, descriptions)

        params = {p.name: p.to_dict() for p in operation.parameters or []}
        assert params["searchText"] == {
            "name": "searchText",
            "in": "query",
            "required": False,
            "schema": {"type": "string", "minLength": 3, "maxLength": 40, "nullable": False},
        }
        assert params["page"]["schema"] == {"type": "integer", "minimum": 1, "exclusiveMinimum": False}
        assert params["pageSize"]["required"] is True
        assert params["pageSize"]["schema"]["maximum"] == 100
        assert not result.has_warnings()


class TestFileDefinitions:
    def test_yaml_validators_drive_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "validators.yaml"
        path.write_text(
            "validators:\n"
            "  Customer:\n"
            "    properties:\n"
            "      name:\n"
            "        - not_empty\n"
            "        - matches: '^[A-Z]'\n"
            "        - matches: '[a-z]$'\n"
            "      age:\n"
            "        - greater_than: 0\n",
            encoding="utf-8",
        )
        provider = PydanticSchemaProvider()
        schema = provider.get_schema_for_type(Customer)

        SchemaRulesFilter(validator_factory=FileValidatorFactory(path)).apply(schema, Customer)

        name = schema.to_dict()["properties"]["name"]
        assert name["pattern"] == "^[A-Z]"
        assert name["allOf"] == [{"pattern": "[a-z]$"}]
        assert schema.properties["age"].exclusive_minimum is True
