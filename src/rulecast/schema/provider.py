"""Schema producers: materialize an :class:`OpenApiSchema` for a model type.

``PydanticSchemaProvider`` uses pydantic's JSON-schema generation and keeps
produced schemas in a :class:`SchemaRepository`, so every lookup for a type
returns the same mutable schema object (the one rules get written into).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import TypeAdapter
from pydantic.errors import PydanticUserError

from rulecast.core.config import SchemaGenerationOptions
from rulecast.core.exceptions import SchemaGenerationError
from rulecast.core.naming import to_lower_camel_case
from rulecast.schema.models import OpenApiSchema

log = logging.getLogger(__name__)


@runtime_checkable
class ISchemaProvider(Protocol):
    """Protocol for schema producers."""

    def get_schema_for_type(self, model_type: type) -> OpenApiSchema:
        """Return the (mutable) schema for ``model_type``.

        Raises:
            SchemaGenerationError: If no schema can be produced.
        """
        ...


class SchemaRepository:
    """Schema id -> schema store (the ``components/schemas`` section)."""

    def __init__(self) -> None:
        self._schemas: dict[str, OpenApiSchema] = {}

    def get(self, schema_id: str) -> OpenApiSchema | None:
        return self._schemas.get(schema_id)

    def add(self, schema_id: str, schema: OpenApiSchema) -> None:
        self._schemas[schema_id] = schema

    def has(self, schema_id: str) -> bool:
        return schema_id in self._schemas

    def schema_ids(self) -> list[str]:
        return sorted(self._schemas)

    def to_dict(self) -> dict[str, dict]:
        return {schema_id: self._schemas[schema_id].to_dict() for schema_id in self.schema_ids()}


def default_schema_id(model_type: type) -> str:
    return model_type.__name__


class PydanticSchemaProvider:
    """Builds schemas for pydantic models, dataclasses and TypedDicts."""

    def __init__(
        self,
        repository: SchemaRepository | None = None,
        *,
        options: SchemaGenerationOptions | None = None,
        schema_id_selector: Callable[[type], str] | None = None,
    ) -> None:
        self._repository = repository or SchemaRepository()
        self._options = options or SchemaGenerationOptions()
        self._schema_id = schema_id_selector or default_schema_id

    @property
    def repository(self) -> SchemaRepository:
        return self._repository

    def get_schema_for_type(self, model_type: type) -> OpenApiSchema:
        schema_id = self._schema_id(model_type)
        existing = self._repository.get(schema_id)
        if existing is not None:
            return existing

        ref_template = self._options.ref_template
        try:
            raw = TypeAdapter(model_type).json_schema(by_alias=True, ref_template=ref_template)
        except PydanticUserError as exc:
            raise SchemaGenerationError(
                f"Cannot generate schema for {model_type.__name__}: {exc}"
            ) from exc

        for def_name, definition in (raw.pop("$defs", None) or {}).items():
            if not self._repository.has(def_name):
                self._repository.add(def_name, self._convert(definition, ref_template))

        schema = self._convert(raw, ref_template)
        self._repository.add(schema_id, schema)
        log.debug("Generated schema %s for %s", schema_id, model_type.__name__)
        return schema

    def _convert(self, raw: dict, ref_template: str) -> OpenApiSchema:
        schema = OpenApiSchema.from_json_schema(raw, ref_template=ref_template)
        if self._options.property_naming == "camel_case":
            schema.properties = {
                to_lower_camel_case(name): prop for name, prop in schema.properties.items()
            }
            schema.required = [to_lower_camel_case(name) for name in schema.required]
        return schema
