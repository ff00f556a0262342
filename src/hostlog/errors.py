"""Structured error types for the record pipeline."""

from __future__ import annotations

from typing import Any


class SerializationError(ValueError):
    """Raised when a value cannot be converted into plain JSON types."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "serialization_failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for diagnostics."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


def ensure_serialization_error(
    error: Exception,
    *,
    code: str = "serialization_failed",
    details: dict[str, Any] | None = None,
) -> SerializationError:
    """Normalize an arbitrary exception into a ``SerializationError``."""
    if isinstance(error, SerializationError):
        return error

    merged_details = dict(details or {})
    merged_details.setdefault("exception_type", type(error).__name__)

    return SerializationError(
        str(error) or "Unknown serialization error",
        code=code,
        details=merged_details,
    )
