"""Pytest configuration and fixtures for hostlog tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from io import BytesIO, StringIO, TextIOWrapper
from typing import TYPE_CHECKING, Any

import pytest

from hostlog.config.settings import ENVIRONMENT_VARIABLE

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def production_mode(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test in production mode unless it opts into development."""
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "production")
    yield


@pytest.fixture
def development_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Switch loggers created afterwards to console output."""
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "development")


@pytest.fixture
def stream() -> StringIO:
    """In-memory output stream for a logger."""
    return StringIO()


@pytest.fixture
def utf8_buffer() -> BytesIO:
    """Bytes written through ``utf8_stream``."""
    return BytesIO()


@pytest.fixture
def utf8_stream(utf8_buffer: BytesIO) -> TextIOWrapper:
    """Strict UTF-8 text stream, like a regular stdout."""
    return TextIOWrapper(utf8_buffer, encoding="utf-8")


@pytest.fixture
def read_lines(stream: StringIO) -> Callable[[], list[str]]:
    """Return the lines written to ``stream`` so far."""

    def _read() -> list[str]:
        return stream.getvalue().splitlines()

    return _read


@pytest.fixture
def read_records(read_lines: Callable[[], list[str]]) -> Callable[[], list[dict[str, Any]]]:
    """Return the JSON records written to ``stream`` so far."""

    def _read() -> list[dict[str, Any]]:
        return [json.loads(line) for line in read_lines()]

    return _read


@pytest.fixture
def sample_snapshot() -> dict[str, Any]:
    """Static environment snapshot for deterministic records."""
    return {
        "system": {
            "platform": "linux",
            "arch": "x86_64",
            "type": "Linux",
            "release": "6.8.0",
            "hostname": "test-host",
        },
        "runtime": {
            "python_version": "3.12.4",
            "pid": 4242,
            "uptime": 17,
            "memory": {
                "rss": 52_428_800,
                "vms": 419_430_400,
                "heap_used": 0,
                "heap_peak": 0,
                "allocated_blocks": 120_000,
            },
        },
        "environment": {"env": "production", "timezone": "UTC", "locale": "en-US"},
        "hardware": {
            "cpu_cores": 8,
            "cpu_model": "x86_64",
            "total_memory": 17_179_869_184,
            "free_memory": 8_589_934_592,
        },
        "network": {"ip_addresses": ["10.0.0.5"], "primary_ip": "10.0.0.5"},
    }


@pytest.fixture
def snapshot_provider(sample_snapshot: dict[str, Any]) -> Callable[[], dict[str, Any]]:
    """Provider returning a fresh copy of ``sample_snapshot`` per call."""

    def _provide() -> dict[str, Any]:
        return json.loads(json.dumps(sample_snapshot))

    return _provide
