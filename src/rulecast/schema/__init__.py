"""Schema documents and schema producers."""

from __future__ import annotations

from rulecast.schema.models import (
    ApiParameterDescription,
    OpenApiOperation,
    OpenApiParameter,
    OpenApiSchema,
)
from rulecast.schema.provider import ISchemaProvider, PydanticSchemaProvider, SchemaRepository

__all__ = [
    "OpenApiSchema",
    "OpenApiParameter",
    "OpenApiOperation",
    "ApiParameterDescription",
    "ISchemaProvider",
    "PydanticSchemaProvider",
    "SchemaRepository",
]
