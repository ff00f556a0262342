"""Final structlog processors producing the line that gets written.

Production output reuses structlog's ``JSONRenderer`` on the already
JSON-ready record. Development output is a colorized single line built by
:class:`DevConsoleRenderer` directly from the severity, message and
context.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from hostlog.serialization import escape_surrogates, pretty
from hostlog.timestamps import console_timestamp, utcnow


RESET = "\033[0m"
WHITE = "\033[37m"
CYAN = "\033[36m"

LEVEL_BACKGROUNDS = {
    "debug": "\033[100m",  # Gray
    "info": "\033[44m",  # Blue
    "warn": "\033[43m",  # Yellow
    "error": "\033[41m",  # Red
    "fatal": "\033[101m",  # Bright red
}

UNSERIALIZABLE_PLACEHOLDER = "[Unable to serialize data]"

# "key": value pairs in indented JSON, value up to the end of line/comma/brace
_KEY_VALUE = re.compile(r'"([^"]+)":\s*([^\n,}]+)')


def _dumps_utf8(obj: Any, **kwargs: Any) -> str:
    return escape_surrogates(json.dumps(obj, **kwargs))


def json_renderer() -> structlog.processors.JSONRenderer:
    """Return the production renderer; keys keep their insertion order."""
    return structlog.processors.JSONRenderer(serializer=_dumps_utf8, ensure_ascii=False)


def format_level_box(level: str) -> str:
    """Render the upper-cased, 5-wide severity label on its background."""
    background = LEVEL_BACKGROUNDS.get(level, "")
    return f"{background}{WHITE}{level.upper():<5}{RESET}"


def highlight_values(text: str) -> str:
    """Color scalar values in pretty-printed JSON, leaving keys plain.

    Values that open a nested object or array are not colored.
    """

    def _color(match: re.Match[str]) -> str:
        key, value = match.group(1), match.group(2).strip()
        if value in ("{", "["):
            return match.group(0)
        return f'"{key}": {CYAN}{value}{RESET}'

    return _KEY_VALUE.sub(_color, text)


def format_context(context: Any) -> str:
    """Render the context suffix of a dev line, or ``""`` when absent.

    Any failure while pretty-printing yields the placeholder.
    """
    if context is None:
        return ""
    try:
        return f" {highlight_values(pretty(context))}"
    except Exception:
        return f" {CYAN}{UNSERIALIZABLE_PLACEHOLDER}{RESET}"


def render_dev(level: str, message: Any, context: Any, now: datetime) -> str:
    """Render ``[timestamp] LEVEL message[ context]`` for the console."""
    return escape_surrogates(
        f"[{console_timestamp(now)}] {format_level_box(level)} "
        f"{message}{format_context(context)}"
    )


class DevConsoleRenderer:
    """structlog processor rendering colorized development lines."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self.clock = clock

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        return render_dev(
            method_name,
            event_dict.get("event", ""),
            event_dict.get("context"),
            self.clock(),
        )
