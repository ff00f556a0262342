"""The hostlog ``Logger`` facade.

Each ``Logger`` owns a private structlog pipeline, so creating one never
touches ``structlog.configure`` or the host application's logging setup:

- development: ``DevConsoleRenderer``
- production: ``RecordBuilder`` followed by ``JSONRenderer``

Every call writes exactly one line through ``structlog.PrintLogger``.

Example:
    >>> log = Logger({"service_name": "checkout", "format": "elasticsearch"})
    >>> log.info("Order placed", {"order_id": "o-123", "total": 42.5})
"""

from __future__ import annotations

import socket
import sys
from collections.abc import Mapping
from functools import partial
from typing import Any, TextIO

import structlog

from hostlog.config.settings import LogFormat, LoggerConfig, Settings
from hostlog.inferred import SnapshotProvider, capture_snapshot
from hostlog.records import RecordBuilder
from hostlog.rendering import DevConsoleRenderer, json_renderer


class Logger:
    """Structured logger writing one JSON or console line per call.

    The output mode is read from ``HOSTLOG_ENVIRONMENT`` once, when the
    logger is created.
    """

    def __init__(
        self,
        config: LoggerConfig | Mapping[str, Any] | str,
        *,
        stream: TextIO | None = None,
        snapshot_provider: SnapshotProvider | None = None,
    ) -> None:
        """
        Initialize the logger.

        Args:
            config: Service name, or a mapping/``LoggerConfig`` with
                ``service_name``, ``format`` and ``include_system_info``.
            stream: Output stream (defaults to stdout).
            snapshot_provider: Source of the ``inferred`` snapshot
                (defaults to :func:`~hostlog.inferred.capture_snapshot`).
        """
        self._config = LoggerConfig.coerce(config)
        self.is_development = Settings().is_development
        self.hostname = socket.gethostname()

        provider = snapshot_provider or partial(capture_snapshot, self.hostname)

        processors: list[structlog.types.Processor]
        if self.is_development:
            processors = [DevConsoleRenderer()]
        else:
            processors = [
                RecordBuilder(self._config, self.hostname, provider),
                json_renderer(),
            ]

        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(stream or sys.stdout),
            processors=processors,
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @property
    def config(self) -> LoggerConfig:
        """The frozen configuration of this logger."""
        return self._config

    @property
    def service_name(self) -> str:
        return self._config.service_name

    @property
    def format(self) -> LogFormat:
        return self._config.format

    @property
    def include_system_info(self) -> bool:
        return self._config.include_system_info

    def debug(self, message: str, context: Any = None) -> None:
        """Log a debug message."""
        self._logger.debug(message, context=context)

    def info(self, message: str, context: Any = None) -> None:
        """Log an info message."""
        self._logger.info(message, context=context)

    def warn(self, message: str, context: Any = None) -> None:
        """Log a warning message."""
        self._logger.warn(message, context=context)

    def error(self, message: str, context: Any = None) -> None:
        """Log an error message."""
        self._logger.error(message, context=context)

    def fatal(self, message: str, context: Any = None) -> None:
        """Log a fatal message."""
        self._logger.fatal(message, context=context)

    def __repr__(self) -> str:
        mode = "development" if self.is_development else self.format
        return f"<Logger service={self.service_name!r} mode={mode}>"
