# src/storage/base_store.py - v1
"""Abstract record store interface (documents and complaints).

Each operation is atomic from the caller's point of view.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from jurisdraft.core.models import Complaint, DocumentRecord

DocumentPredicate = Callable[[DocumentRecord], bool]


class BaseRecordStore(ABC):
    """Append-only document/complaint collections keyed by id."""

    @abstractmethod
    async def find_document(self, document_id: str) -> DocumentRecord | None:
        """Return the document, or None if absent."""

    @abstractmethod
    async def list_documents(self, predicate: DocumentPredicate | None = None) -> list[DocumentRecord]:
        """Documents matching ``predicate``, in store order."""

    @abstractmethod
    async def put_document(self, document: DocumentRecord) -> None:
        """Insert or replace a document by id."""

    @abstractmethod
    async def append_complaint(self, complaint: Complaint) -> None:
        """Append a complaint record."""

    @abstractmethod
    async def link_complaint_to_document(self, document_id: str, complaint_id: str) -> None:
        """Record ``complaint_id`` on the document.

        Raises:
            NotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def list_complaints(self) -> list[Complaint]:
        """All complaints, in insertion order."""
