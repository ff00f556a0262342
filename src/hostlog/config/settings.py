"""hostlog configuration.

``LoggerConfig`` holds the per-logger options fixed at construction.
``Settings`` reads the process environment through Pydantic Settings to
decide between development and production output.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


LogFormat = Literal["datadog", "elasticsearch"]

ENVIRONMENT_VARIABLE = "HOSTLOG_ENVIRONMENT"
DEVELOPMENT = "development"


class LoggerConfig(BaseModel):
    """Options for a single ``Logger`` instance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    service_name: str = Field(
        validation_alias=AliasChoices("service_name", "serviceName"),
        description="Service identity written into every record",
    )
    format: LogFormat = Field(
        default="datadog",
        description="Production record schema",
    )
    include_system_info: bool = Field(
        default=True,
        validation_alias=AliasChoices("include_system_info", "includeSystemInfo"),
        description="Attach an environment snapshot under 'inferred'",
    )

    @classmethod
    def coerce(cls, value: LoggerConfig | Mapping[str, Any] | str) -> LoggerConfig:
        """Build a config from a bare service name, a mapping, or a config.

        A bare string is shorthand for ``LoggerConfig(service_name=value)``.
        Mappings may spell keys ``serviceName``/``includeSystemInfo`` too.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(service_name=value)
        return cls.model_validate(dict(value))


class Settings(BaseSettings):
    """Process-level settings read from ``HOSTLOG_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOSTLOG_",
        extra="ignore",
        case_sensitive=False,
    )

    environment: str | None = Field(
        default=None,
        description="Deployment environment; only 'development' enables console output",
    )

    @property
    def is_development(self) -> bool:
        """Whether colorized console output should be used."""
        return self.environment == DEVELOPMENT
