"""Tests for the parameter-binding adapter and OperationRulesFilter."""

from __future__ import annotations

import logging

import pytest

from rulecast.engine.diagnostics import DiagnosticCode
from rulecast.engine.operation_filter import OperationRulesFilter, apply_to_parameter
from rulecast.rules.catalog import RuleCatalog
from rulecast.rules.models import RuleContext, SchemaRule
from rulecast.schema.models import (
    ApiParameterDescription,
    OpenApiOperation,
    OpenApiParameter,
    OpenApiSchema,
)
from rulecast.validators.field_validators import LengthValidator
from tests.fakes.fake_schema_provider import FakeSchemaProvider, make_object_schema
from tests.fakes.fake_validator_factory import FakeValidatorFactory
from tests.fakes.sample_models import Customer, CustomerQuery, CustomerQueryValidator


def _query_schema() -> OpenApiSchema:
    return make_object_schema(searchText="string", page="integer", pageSize="integer")


def _parameter(name: str, type_: str = "string", location: str = "query") -> OpenApiParameter:
    return OpenApiParameter(name=name, location=location, schema_=OpenApiSchema(type=type_))


def _descriptions(*names: str, container: type | None = CustomerQuery) -> list[ApiParameterDescription]:
    return [ApiParameterDescription(name=name, container_type=container) for name in names]


@pytest.fixture()
def provider() -> FakeSchemaProvider:
    return FakeSchemaProvider({CustomerQuery: _query_schema()})


@pytest.fixture()
def factory() -> FakeValidatorFactory:
    return FakeValidatorFactory({CustomerQuery: CustomerQueryValidator()})


class TestApplyToParameter:
    def test_copies_constraints_to_parameter_schema(
        self, provider: FakeSchemaProvider, default_catalog: RuleCatalog
    ) -> None:
        parameter = _parameter("searchText")

        result = apply_to_parameter(
            parameter,
            CustomerQuery,
            "searchText",
            CustomerQueryValidator(),
            default_catalog,
            schema_provider=provider,
        )

        assert parameter.schema_ is not None
        assert (parameter.schema_.min_length, parameter.schema_.max_length) == (3, 40)
        assert parameter.schema_.nullable is False
        assert parameter.required is False
        assert ("Length", "searchText") in result.applied

    def test_required_follows_property(self, provider: FakeSchemaProvider, default_catalog: RuleCatalog) -> None:
        parameter = _parameter("pageSize", "integer")

        apply_to_parameter(
            parameter,
            CustomerQuery,
            "pageSize",
            CustomerQueryValidator(),
            default_catalog,
            schema_provider=provider,
        )

        assert parameter.required is True
        assert parameter.schema_ is not None
        assert (parameter.schema_.minimum, parameter.schema_.maximum) == (1, 100)
        assert parameter.schema_.exclusive_minimum is False

    def test_path_parameter_stays_required(
        self, provider: FakeSchemaProvider, default_catalog: RuleCatalog
    ) -> None:
        parameter = _parameter("page", "integer", location="path")
        parameter.required = True

        apply_to_parameter(
            parameter,
            CustomerQuery,
            "page",
            CustomerQueryValidator(),
            default_catalog,
            schema_provider=provider,
        )

        assert parameter.required is True
        assert parameter.schema_ is not None
        assert parameter.schema_.minimum == 1

    def test_snake_case_field_name_reconciled(
        self, provider: FakeSchemaProvider, default_catalog: RuleCatalog
    ) -> None:
        parameter = _parameter("page_size", "integer")

        apply_to_parameter(
            parameter,
            CustomerQuery,
            "page_size",
            CustomerQueryValidator(),
            default_catalog,
            schema_provider=provider,
        )

        assert parameter.required is True
        assert parameter.schema_ is not None
        assert parameter.schema_.maximum == 100

    def test_parameter_untouched_when_provider_fails(self, default_catalog: RuleCatalog) -> None:
        parameter = _parameter("searchText")
        before = parameter.model_dump()

        with pytest.raises(KeyError):
            apply_to_parameter(
                parameter,
                Customer,
                "searchText",
                CustomerQueryValidator(),
                default_catalog,
                schema_provider=FakeSchemaProvider(),
            )

        assert parameter.model_dump() == before

    def test_parameter_without_schema_gets_required_only(
        self, provider: FakeSchemaProvider, default_catalog: RuleCatalog
    ) -> None:
        parameter = OpenApiParameter(name="pageSize")

        apply_to_parameter(
            parameter,
            CustomerQuery,
            "pageSize",
            CustomerQueryValidator(),
            default_catalog,
            schema_provider=provider,
        )

        assert parameter.required is True
        assert parameter.schema_ is None


class TestOperationRulesFilter:
    def test_annotates_all_bound_parameters(
        self, provider: FakeSchemaProvider, factory: FakeValidatorFactory
    ) -> None:
        operation = OpenApiOperation(
            operation_id="listCustomers",
            parameters=[_parameter("searchText"), _parameter("page", "integer"), _parameter("pageSize", "integer")],
        )

        result = OperationRulesFilter(provider, factory).apply(
            operation, _descriptions("searchText", "page", "pageSize")
        )

        search, page, page_size = operation.parameters or []
        assert search.schema_ is not None and search.schema_.min_length == 3
        assert page.schema_ is not None and page.schema_.minimum == 1
        assert page_size.required is True
        assert not result.has_warnings()

    def test_parameters_without_container_skipped(
        self, provider: FakeSchemaProvider, factory: FakeValidatorFactory
    ) -> None:
        operation = OpenApiOperation(operation_id="getCustomer", parameters=[_parameter("id", location="path")])

        result = OperationRulesFilter(provider, factory).apply(operation, _descriptions("id", container=None))

        assert factory.calls == []
        assert result.diagnostics == []

    def test_undescribed_parameter_skipped(
        self, provider: FakeSchemaProvider, factory: FakeValidatorFactory
    ) -> None:
        operation = OpenApiOperation(operation_id="listCustomers", parameters=[_parameter("searchText")])

        OperationRulesFilter(provider, factory).apply(operation, [])

        assert factory.calls == []

    def test_description_name_case_insensitive(
        self, provider: FakeSchemaProvider, factory: FakeValidatorFactory
    ) -> None:
        operation = OpenApiOperation(operation_id="listCustomers", parameters=[_parameter("searchText")])

        OperationRulesFilter(provider, factory).apply(operation, _descriptions("SEARCHTEXT"))

        param = (operation.parameters or [])[0]
        assert param.schema_ is not None and param.schema_.max_length == 40

    def test_no_validator_skips_silently(self, provider: FakeSchemaProvider) -> None:
        operation = OpenApiOperation(operation_id="listCustomers", parameters=[_parameter("searchText")])

        result = OperationRulesFilter(provider, FakeValidatorFactory()).apply(
            operation, _descriptions("searchText")
        )

        assert result.diagnostics == []
        assert provider.calls == []

    def test_empty_operation(self, provider: FakeSchemaProvider, factory: FakeValidatorFactory) -> None:
        result = OperationRulesFilter(provider, factory).apply(OpenApiOperation(path="/health"), [])

        assert result.diagnostics == []
        assert factory.calls == []

    def test_no_factory_warns(self, provider: FakeSchemaProvider, caplog: pytest.LogCaptureFixture) -> None:
        operation = OpenApiOperation(operation_id="listCustomers", parameters=[_parameter("searchText")])

        with caplog.at_level(logging.WARNING, logger="rulecast"):
            result = OperationRulesFilter(provider).apply(operation, _descriptions("searchText"))

        assert len(caplog.records) == 1
        assert result.by_code(DiagnosticCode.FACTORY_MISSING)

    def test_failure_isolated_per_parameter(self, caplog: pytest.LogCaptureFixture) -> None:
        provider = FakeSchemaProvider({CustomerQuery: _query_schema()})
        factory = FakeValidatorFactory({CustomerQuery: CustomerQueryValidator(), Customer: CustomerQueryValidator()})
        broken = _parameter("name")
        operation = OpenApiOperation(operation_id="search", parameters=[broken, _parameter("searchText")])
        descriptions = [
            ApiParameterDescription(name="name", container_type=Customer),
            ApiParameterDescription(name="searchText", container_type=CustomerQuery),
        ]

        with caplog.at_level(logging.WARNING, logger="rulecast"):
            result = OperationRulesFilter(provider, factory).apply(operation, descriptions)

        assert broken.schema_ is not None and broken.schema_.max_length is None
        searched = (operation.parameters or [])[1]
        assert searched.schema_ is not None and searched.schema_.min_length == 3
        failed = result.by_code(DiagnosticCode.OPERATION_FAILED)
        assert [(d.model_type, d.property_name) for d in failed] == [("Customer", "name")]
        assert caplog.records[0].getMessage() == "Error on apply rules for operation 'search' parameter 'name'"

    def test_custom_rules_used(self, provider: FakeSchemaProvider, factory: FakeValidatorFactory) -> None:
        def apply_doubled(context: RuleContext) -> None:
            validator = context.field_validator
            assert isinstance(validator, LengthValidator)
            if validator.max:
                context.property_schema.max_length = validator.max * 2

        custom = SchemaRule("Length", lambda v: isinstance(v, LengthValidator), apply_doubled)
        operation = OpenApiOperation(operation_id="search", parameters=[_parameter("searchText")])
        operation_filter = OperationRulesFilter(provider, factory, rules=[custom])

        operation_filter.apply(operation, _descriptions("searchText"))

        assert operation_filter.rules.get("Length") is custom
        param = (operation.parameters or [])[0]
        assert param.schema_ is not None
        assert param.schema_.max_length == 80
        assert param.schema_.min_length is None
