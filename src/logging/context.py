# src/logging/context.py - v2
"""Contextual logging support: attach request_id, document_id and task to log records."""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

# Set per external request; asyncio tasks inherit a copy.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_task: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "task", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    document_id: str | None = None
    task: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        document_id=_document_id.get(),
        task=_task.get(),
    )


def set_request_context(request_id: str | None = None) -> str:
    """Start a request scope; generates a short id when none is given."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def set_document_context(document_id: str | None) -> None:
    _document_id.set(document_id)


def set_task_context(task: str | None) -> None:
    """Set the model task being executed (analysis, complaint, attachment)."""
    _task.set(task)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _document_id.set(None)
    _task.set(None)
