"""Nested pydantic-settings configuration for rulecast.

Each group reads its own ``RULECAST_<GROUP>_*`` env vars::

    export RULECAST_SCHEMA_PROPERTY_NAMING=camel_case
    export RULECAST_OBSERVABILITY_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class SchemaGenerationOptions(BaseSettings):
    """Conventions used while writing constraints into schemas.

    Env vars use ``RULECAST_SCHEMA_`` prefix.
    """

    model_config = {"env_prefix": "RULECAST_SCHEMA_"}

    # Casing of property names in produced schemas (pydantic alias generators)
    property_naming: Literal["as_is", "camel_case"] = "as_is"
    # Match "user_name" against "userName" when pairing validators with properties
    ignore_name_separators: bool = True
    set_not_nullable_if_min_length_greater_than_zero: bool = True
    use_all_of_for_multiple_rules: bool = True
    ref_template: str = "#/components/schemas/{model}"


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``RULECAST_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "RULECAST_OBSERVABILITY_"}

    log_level: str = "INFO"
    json_logs: bool | None = None


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    schema_generation: SchemaGenerationOptions = SchemaGenerationOptions()
    observability: ObservabilityConfig = ObservabilityConfig()
