"""hostlog configuration package.

Per-logger options and environment-driven settings using Pydantic.
"""

from hostlog.config.settings import (
    ENVIRONMENT_VARIABLE,
    LogFormat,
    LoggerConfig,
    Settings,
)

__all__: list[str] = ["ENVIRONMENT_VARIABLE", "LogFormat", "LoggerConfig", "Settings"]
