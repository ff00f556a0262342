"""hostlog - structured logging with host facts.

Writes colorized console lines in development and single-line JSON
records (Datadog or Elasticsearch schema) in production, optionally
enriched with a snapshot of the host, runtime and network.
"""

from hostlog.config.settings import LogFormat, LoggerConfig
from hostlog.logger import Logger
from hostlog.records import LOG_LEVELS, LogLevel
from hostlog.version import __version__


__all__ = [
    "LOG_LEVELS",
    "LogFormat",
    "LogLevel",
    "Logger",
    "LoggerConfig",
    "__version__",
]
