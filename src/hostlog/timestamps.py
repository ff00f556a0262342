"""Timestamp formats used by the two record schemas and the dev console."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def datadog_timestamp(now: datetime) -> str:
    """Format ``now`` as local time with nanosecond digits and a UTC offset.

    Only millisecond precision is available, so the last six fractional
    digits are always zero.

    Example:
        >>> datadog_timestamp(now)
        '2026-10-19T14:03:07.412000000+02:00'
    """
    local = now.astimezone()
    nanoseconds = (local.microsecond // 1000) * 1_000_000
    offset = local.strftime("%z")
    return (
        f"{local:%Y-%m-%dT%H:%M:%S}.{nanoseconds:09d}"
        f"{offset[:3]}:{offset[3:5]}"
    )


def elasticsearch_timestamp(now: datetime) -> str:
    """Format ``now`` as UTC ISO 8601 with milliseconds and a ``Z`` suffix."""
    utc = now.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def console_timestamp(now: datetime) -> str:
    """Format ``now`` as local ``YYYY-MM-DD HH:MM:SS.mmm`` for dev output."""
    local = now.astimezone()
    return f"{local:%Y-%m-%d %H:%M:%S}.{local.microsecond // 1000:03d}"
