"""Production record construction for the Datadog and Elasticsearch schemas.

A record is built in three steps:

1. the fixed schema fields (timestamp, message, severity, service, host)
2. the optional ``inferred`` environment snapshot
3. the caller's context, merged last

Mapping contexts are merged into the top level and win on every shared
key, including the fixed fields. Any other non-``None`` context is stored
verbatim under ``data``.

If anything in assembly or serialization fails, a degraded record with
only the fixed fields is returned instead, so a line is always written.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from hostlog.config.settings import LogFormat, LoggerConfig
from hostlog.inferred import SnapshotProvider
from hostlog.serialization import to_jsonable
from hostlog.timestamps import datadog_timestamp, elasticsearch_timestamp, utcnow


LogLevel = Literal["debug", "info", "warn", "error", "fatal"]

LOG_LEVELS: tuple[LogLevel, ...] = ("debug", "info", "warn", "error", "fatal")

DATA_FIELD = "data"
INFERRED_FIELD = "inferred"
DATADOG_SOURCE = "node"
SERIALIZATION_ERROR_SUFFIX = " [Log serialization error]"


@dataclass(frozen=True)
class LogRecord:
    """Result of building one production record."""

    fields: dict[str, Any]
    degraded: bool = False


def _datadog_fields(
    level: str, message: Any, service_name: str, hostname: str, now: datetime
) -> dict[str, Any]:
    return {
        "@timestamp": datadog_timestamp(now),
        "message": message,
        "status": level.upper(),
        "service": service_name,
        "hostname": hostname,
        "ddsource": DATADOG_SOURCE,
    }


def _elasticsearch_fields(
    level: str, message: Any, service_name: str, hostname: str, now: datetime
) -> dict[str, Any]:
    return {
        "@timestamp": elasticsearch_timestamp(now),
        "level": level.upper(),
        "message": message,
        "service": {"name": service_name},
        "host": {"name": hostname},
    }


SCHEMAS: dict[LogFormat, Callable[..., dict[str, Any]]] = {
    "datadog": _datadog_fields,
    "elasticsearch": _elasticsearch_fields,
}


def merge_context(fields: dict[str, Any], context: Any) -> None:
    """Merge caller context into ``fields`` in place.

    Mappings overlay their keys onto the record, overriding fixed fields.
    Lists, tuples and scalars land under ``data``. ``None`` is a no-op.
    """
    if context is None:
        return
    if isinstance(context, Mapping):
        fields.update(context)
    else:
        fields[DATA_FIELD] = context


def build_record(
    format: LogFormat,
    level: str,
    message: Any,
    context: Any,
    config: LoggerConfig,
    now: datetime,
    snapshot_provider: SnapshotProvider,
    hostname: str,
) -> LogRecord:
    """Build the JSON-ready record for one log call.

    Args:
        format: Record schema; unknown values fall back to Datadog.
        level: Severity name.
        message: Log message.
        context: Optional caller payload.
        config: Logger configuration.
        now: Aware datetime of the call.
        snapshot_provider: Callable returning the ``inferred`` snapshot.
        hostname: Host identity written into the record.

    Returns:
        LogRecord: The full record, or a degraded one if the context could
        not be merged or serialized.
    """
    schema = SCHEMAS.get(format, _datadog_fields)
    try:
        fields = schema(level, message, config.service_name, hostname, now)
        if config.include_system_info:
            fields[INFERRED_FIELD] = snapshot_provider()
        merge_context(fields, context)
        return LogRecord(fields=to_jsonable(fields))
    except Exception:
        fields = schema(
            level,
            f"{message}{SERIALIZATION_ERROR_SUFFIX}",
            config.service_name,
            hostname,
            now,
        )
        if config.include_system_info:
            fields[INFERRED_FIELD] = snapshot_provider()
        return LogRecord(fields=to_jsonable(fields), degraded=True)


class RecordBuilder:
    """structlog processor turning ``event``/``context`` into a record.

    The method name the logger was called with is the severity.
    """

    def __init__(
        self,
        config: LoggerConfig,
        hostname: str,
        snapshot_provider: SnapshotProvider,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.config = config
        self.hostname = hostname
        self.snapshot_provider = snapshot_provider
        self.clock = clock

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        record = build_record(
            self.config.format,
            method_name,
            event_dict.get("event", ""),
            event_dict.get("context"),
            self.config,
            self.clock(),
            self.snapshot_provider,
            self.hostname,
        )
        return record.fields
