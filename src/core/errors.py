# src/core/errors.py — v1
"""Error taxonomy shared by the store, the session cache and the engine.

``ConfigurationError`` is fatal and raised at construction time.
``NotFoundError`` and ``LoadError`` are per-document failures; the resolution
engine turns them into diagnostics instead of propagating them.
"""

from __future__ import annotations


class ReviewRefError(Exception):
    """Base class for all reviewref errors."""


class ConfigurationError(ReviewRefError):
    """Raised when the manifest or settings are invalid or inconsistent."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(ReviewRefError, KeyError):
    """Raised when an unknown document key is requested."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown reference document: {self.key!r}"


class LoadError(ReviewRefError):
    """Raised when the backing storage fails to produce a document body.

    Load errors are retryable: the session cache never records them
    permanently.
    """

    def __init__(self, key: str, location: str, reason: str) -> None:
        super().__init__(f"Failed to load {key!r} from {location!r}: {reason}")
        self.key = key
        self.location = location
        self.reason = reason
