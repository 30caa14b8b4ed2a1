"""OpenAPI 3.0 document fragments annotated by the rules engine.

Attribute names are snake_case; ``to_dict()`` emits the OpenAPI camelCase
keywords (``minLength``, ``exclusiveMinimum``, ``$ref``, ``in``).
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]

_JSON_SCHEMA_NULL = "null"
_NESTED_FIELDS = {"properties", "required", "items", "all_of", "any_of", "default"}


class OpenApiSchema(BaseModel):
    """A schema object: one model, or one property of a model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    properties: dict[str, OpenApiSchema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    items: Optional[OpenApiSchema] = None
    enum: Optional[list[Any]] = None
    default: Any = None

    # Constraints written by schema rules
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    pattern: Optional[str] = None
    nullable: Optional[bool] = None
    all_of: list[OpenApiSchema] = Field(default_factory=list)
    any_of: list[OpenApiSchema] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with OpenAPI keyword names, dropping unset values.

        Empty ``properties``, ``required``, ``allOf`` and ``anyOf`` are left
        out.  ``default`` is emitted whenever it was given, even as ``null``
        or an empty container.
        """
        data = self.model_dump(by_alias=True, exclude_none=True, exclude=_NESTED_FIELDS)
        if "default" in self.model_fields_set:
            data["default"] = self.default
        if self.properties:
            data["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        if self.required:
            data["required"] = list(self.required)
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.all_of:
            data["allOf"] = [sub.to_dict() for sub in self.all_of]
        if self.any_of:
            data["anyOf"] = [sub.to_dict() for sub in self.any_of]
        return data

    @classmethod
    def from_json_schema(
        cls,
        data: dict[str, Any],
        *,
        ref_template: str = "#/components/schemas/{model}",
    ) -> OpenApiSchema:
        """Convert a (pydantic-generated) JSON Schema dict to an OpenAPI 3.0 schema.

        Handles the JSON Schema / OpenAPI 3.0 differences that matter for
        constraints: ``anyOf [X, null]`` and ``type: [X, "null"]`` become a
        nullable X, numeric ``exclusiveMinimum``/``exclusiveMaximum`` become
        ``minimum``/``maximum`` plus a boolean flag, and ``#/$defs/`` refs are
        retargeted with ``ref_template``.
        """
        data = dict(data)
        nullable: bool | None = None

        any_of = data.pop("anyOf", None)
        if any_of:
            non_null = [s for s in any_of if s.get("type") != _JSON_SCHEMA_NULL]
            if len(non_null) < len(any_of):
                nullable = True
            if len(non_null) == 1:
                data = {**non_null[0], **data}
            else:
                data["anyOf"] = non_null

        raw_type = data.get("type")
        if isinstance(raw_type, list):
            types = [t for t in raw_type if t != _JSON_SCHEMA_NULL]
            if len(types) < len(raw_type):
                nullable = True
            data["type"] = types[0] if len(types) == 1 else None

        schema = cls(
            type=data.get("type"),
            format=data.get("format"),
            title=data.get("title"),
            description=data.get("description"),
            ref=_retarget_ref(data.get("$ref"), ref_template),
            enum=data.get("enum"),
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            min_items=data.get("minItems"),
            max_items=data.get("maxItems"),
            minimum=data.get("minimum"),
            maximum=data.get("maximum"),
            pattern=data.get("pattern"),
            nullable=nullable if nullable is not None else data.get("nullable"),
            required=list(data.get("required", [])),
        )
        if "default" in data:
            schema.default = data["default"]

        exclusive_min = data.get("exclusiveMinimum")
        if isinstance(exclusive_min, bool):
            schema.exclusive_minimum = exclusive_min
        elif exclusive_min is not None:
            schema.minimum = exclusive_min
            schema.exclusive_minimum = True

        exclusive_max = data.get("exclusiveMaximum")
        if isinstance(exclusive_max, bool):
            schema.exclusive_maximum = exclusive_max
        elif exclusive_max is not None:
            schema.maximum = exclusive_max
            schema.exclusive_maximum = True

        for name, prop in (data.get("properties") or {}).items():
            schema.properties[name] = cls.from_json_schema(prop, ref_template=ref_template)
        if data.get("items"):
            schema.items = cls.from_json_schema(data["items"], ref_template=ref_template)
        for sub in data.get("allOf") or []:
            schema.all_of.append(cls.from_json_schema(sub, ref_template=ref_template))
        for sub in data.get("anyOf") or []:
            schema.any_of.append(cls.from_json_schema(sub, ref_template=ref_template))

        return schema


class OpenApiParameter(BaseModel):
    """A single operation parameter (query, path, header, cookie)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: Literal["query", "path", "header", "cookie"] = Field(default="query", alias="in")
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[OpenApiSchema] = Field(default=None, alias="schema")

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"schema_"})
        if self.schema_ is not None:
            data["schema"] = self.schema_.to_dict()
        return data


class OpenApiOperation(BaseModel):
    """An operation with its declared parameters."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    operation_id: Optional[str] = None
    path: str = ""
    parameters: Optional[list[OpenApiParameter]] = None


class ApiParameterDescription(BaseModel):
    """Framework-side description of how a parameter is bound.

    ``container_type`` is the model whose property the parameter binds to
    (e.g. a query-string model flattened into individual parameters).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    container_type: Optional[type] = None
    source: str = "query"


# ── Internal helpers ────────────────────────────────────────────────


def _retarget_ref(ref: str | None, ref_template: str) -> str | None:
    if ref and ref.startswith("#/$defs/"):
        return ref_template.format(model=ref[len("#/$defs/"):])
    return ref

