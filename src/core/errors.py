# src/core/errors.py - v1
"""Error taxonomy shared by the orchestrator, analyzer and complaint pipeline.

Propagation rules:
  - QueryOrchestrator never swallows errors.
  - LegalAnalyzer turns failures into a placeholder AnalysisResult.
  - ComplaintPipeline turns model failures into the fallback complaint.
"""

from __future__ import annotations


class JurisdraftError(Exception):
    """Base class for all package errors."""


class ValidationError(JurisdraftError):
    """A required request field is missing or blank. Never retried."""


class NotFoundError(JurisdraftError):
    """A referenced document or complaint id does not exist in the store."""

    def __init__(self, identifier: str, kind: str = "document") -> None:
        self.identifier = identifier
        self.kind = kind
        super().__init__(f"{kind.capitalize()} not found: {identifier}")


class TransportError(JurisdraftError):
    """Connection failure or timeout talking to the model backend."""


class BackendError(JurisdraftError):
    """The model server answered with an error payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        suffix = f" (status {status_code})" if status_code is not None else ""
        super().__init__(f"Model backend error{suffix}: {message}")


class DecodeError(JurisdraftError):
    """A model reply could not be interpreted as structured data."""


class InvalidResponse(JurisdraftError):
    """A decoded reply lacks a field the caller cannot do without."""


class QueryError(JurisdraftError):
    """The orchestrator gave up on a query; ``cause`` holds the last failure."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class DeadlineExceeded(QueryError):
    """The caller-supplied deadline expired before the query could finish."""
