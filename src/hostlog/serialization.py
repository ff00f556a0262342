"""Cycle-safe conversion of arbitrary values into JSON.

Every value is reduced to plain ``dict``/``list``/``str``/``int``/
``float``/``bool``/``None`` before it reaches :mod:`json`, so the
encoder itself never has to deal with unknown types or cycles:

- containers already visited during the same walk become ``"[Circular]"``
- objects exposing a ``to_dict()`` hook, pydantic models, dataclasses,
  dates, enums, bytes and sets are converted through their natural hook
- anything else falls back to ``str(value)``

A hook, iterator or key conversion that raises surfaces as
:class:`~hostlog.errors.SerializationError`.

Lone surrogates (``os.fsdecode`` of undecodable names, ``surrogateescape``
argv) are written as ``\\uXXXX`` escapes so the text always encodes as UTF-8.
"""

from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from hostlog.errors import SerializationError, ensure_serialization_error


CIRCULAR_MARKER = "[Circular]"

_SCALARS = (str, int, bool, type(None))


def to_jsonable(value: Any) -> Any:
    """Convert ``value`` into plain JSON types.

    Args:
        value: Any in-memory value.

    Returns:
        A structure made only of dicts, lists and JSON scalars.

    Raises:
        SerializationError: If a custom hook, an iterator or a key
            conversion raises, or the structure is nested too deeply to walk.
    """
    seen: dict[int, Any] = {}
    try:
        return _walk(value, seen)
    except RecursionError as exc:
        raise SerializationError(
            "Structure is nested too deeply to serialize",
            code="serialization_depth_exceeded",
        ) from exc


def dumps(value: Any, indent: int | None = None) -> str:
    """Serialize ``value`` to a JSON string.

    Raises:
        SerializationError: See :func:`to_jsonable`.
    """
    return escape_surrogates(
        json.dumps(to_jsonable(value), indent=indent, ensure_ascii=False)
    )


def pretty(value: Any) -> str:
    """Serialize ``value`` as indented, multi-line JSON."""
    return dumps(value, indent=2)


def escape_surrogates(text: str) -> str:
    """Replace lone surrogates with ``\\uXXXX`` so ``text`` encodes as UTF-8.

    Inside a JSON string literal the escape decodes back to the same code
    point, matching what ``JSON.stringify`` writes.
    """
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _walk(value: Any, seen: dict[int, Any]) -> Any:
    if isinstance(value, _SCALARS):
        return value

    if isinstance(value, float):
        # JSON has no representation for NaN/Infinity
        return value if math.isfinite(value) else None

    if isinstance(value, (Mapping, list, tuple)):
        if id(value) in seen:
            return CIRCULAR_MARKER
        seen[id(value)] = value

        if isinstance(value, Mapping):
            return {
                _key(key): _walk(item, seen) for key, item in _items(value)
            }
        return [_walk(item, seen) for item in _elements(value)]

    converted = _apply_hook(value)
    if isinstance(converted, (Mapping, list, tuple)):
        # objects whose hook yields a container take part in cycle detection
        if id(value) in seen:
            return CIRCULAR_MARKER
        seen[id(value)] = value
    return _walk(converted, seen)


def _items(mapping: Mapping[Any, Any]) -> list[tuple[Any, Any]]:
    try:
        return list(mapping.items())
    except RecursionError:
        raise
    except Exception as exc:
        raise ensure_serialization_error(
            exc, details={"type": type(mapping).__name__}
        ) from exc


def _elements(sequence: list[Any] | tuple[Any, ...]) -> list[Any]:
    try:
        return list(sequence)
    except RecursionError:
        raise
    except Exception as exc:
        raise ensure_serialization_error(
            exc, details={"type": type(sequence).__name__}
        ) from exc


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    try:
        return str(key)
    except RecursionError:
        raise
    except Exception as exc:
        raise ensure_serialization_error(
            exc, details={"key_type": type(key).__name__}
        ) from exc


def _apply_hook(value: Any) -> Any:
    """Reduce a non-JSON value through its most specific conversion hook."""
    try:
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()

        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {
                field.name: getattr(value, field.name)
                for field in dataclasses.fields(value)
            }

        if isinstance(value, (datetime, date, time)):
            return value.isoformat()

        if isinstance(value, Enum):
            return value.value

        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")

        if isinstance(value, (set, frozenset)):
            return list(value)

        return str(value)
    except RecursionError:
        raise
    except Exception as exc:
        raise ensure_serialization_error(
            exc, details={"type": type(value).__name__}
        ) from exc
