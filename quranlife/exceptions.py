"""
Custom exception types for QuranLife.

This module defines a hierarchy of exceptions used throughout the codebase.
Using specific exception types enables:
- More precise error handling with targeted except blocks
- A clear split between "the scripture source failed" and "nothing matched"
- Cleaner separation of error domains

A search or thematic lookup that legitimately finds nothing is *not* an
error; it is reported as ``RetrievalStatus.NO_MATCH`` (see ``quranlife.models``).
"""

from __future__ import annotations

from typing import Any


class QuranLifeError(Exception):
    """Base exception for all QuranLife errors.

    All custom exceptions in QuranLife should inherit from this class
    to enable catching all QuranLife-specific errors with a single handler.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================================
# Scripture Source Errors
# ============================================================================


class ScriptureSourceError(QuranLifeError):
    """Base exception for failures talking to the remote scripture source."""

    pass


class SourceUnavailableError(ScriptureSourceError):
    """Raised on network failure, non-success status, timeout or open circuit."""

    def __init__(self, endpoint: str, reason: str, status: int | None = None):
        details: dict[str, Any] = {"endpoint": endpoint, "reason": reason}
        if status is not None:
            details["status"] = status
        super().__init__(f"Scripture source unavailable: {reason}", details)
        self.endpoint = endpoint
        self.reason = reason
        self.status = status


class MalformedResponseError(ScriptureSourceError):
    """Raised when an external payload is missing or has unexpected fields."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(
            f"Malformed scripture response: {reason}",
            {"endpoint": endpoint, "reason": reason},
        )
        self.endpoint = endpoint
        self.reason = reason


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(QuranLifeError):
    """Base exception for validation errors."""

    pass


class InputValidationError(ValidationError):
    """Raised when user input fails validation."""

    def __init__(self, field: str, reason: str, value: Any = None):
        super().__init__(
            f"Invalid input for '{field}': {reason}",
            {"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason
        self.value = value


class ConfigurationError(QuranLifeError):
    """Raised when configuration is invalid or missing."""

    pass


class RateLimitExceededError(QuranLifeError):
    """Raised when a caller exceeds the outbound call budget."""

    def __init__(self, limit: int, window_seconds: float):
        super().__init__(
            f"Rate limit exceeded: {limit} calls per {window_seconds:g}s",
            {"limit": limit, "window_seconds": window_seconds},
        )
        self.limit = limit
        self.window_seconds = window_seconds


__all__ = [
    "QuranLifeError",
    "ScriptureSourceError",
    "SourceUnavailableError",
    "MalformedResponseError",
    "ValidationError",
    "InputValidationError",
    "ConfigurationError",
    "RateLimitExceededError",
]
