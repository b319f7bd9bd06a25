# src/logging/context.py — v1
"""Contextual logging support — attach session_id and request_id to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per review session / resolve call.
_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    session_id: str | None = None
    request_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        session_id=_session_id.get(),
        request_id=_request_id.get(),
    )


def set_session_context(session_id: str | None) -> contextvars.Token[str | None]:
    """Set session-level context (called when a review session opens)."""
    return _session_id.set(session_id)


def reset_session_context(token: contextvars.Token[str | None]) -> None:
    _session_id.reset(token)


def set_request_context(request_id: str | None) -> contextvars.Token[str | None]:
    """Set request-level context (called per resolve call)."""
    return _request_id.set(request_id)


def reset_request_context(token: contextvars.Token[str | None]) -> None:
    _request_id.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _session_id.set(None)
    _request_id.set(None)
