# src/complaint/pipeline.py - v1
"""Complaint aggregation pipeline.

Resolves the subject document and its related documents, prompts the model
for a complaint letter, and substitutes the deterministic fallback template
whenever the model path fails. Once the subject document is resolved,
``generate`` cannot fail: the draft step returns a ComplaintDraft in every
case and the failure cause only goes to the log.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal

from jurisdraft.complaint.fallback import build_fallback_complaint
from jurisdraft.config.settings import Settings
from jurisdraft.core.errors import NotFoundError, ValidationError
from jurisdraft.core.models import (
    Complaint,
    ComplaintAnalysis,
    ComplaintDocument,
    ComplaintRequest,
    DocumentRecord,
    utc_now,
)
from jurisdraft.llm.models import QueryOptions
from jurisdraft.llm.query_orchestrator import QueryOrchestrator
from jurisdraft.logging.context import set_document_context
from jurisdraft.prompts.builder import (
    COMPLAINT_MAIN_TEXT_LIMIT,
    COMPLAINT_RELATED_TEXT_LIMIT,
    build_complaint_prompt,
)
from jurisdraft.storage.base_store import BaseRecordStore

logger = logging.getLogger(__name__)

# Earlier prompt versions asked for these keys instead of "content".
_CONTENT_KEYS = ("content", "complaint", "text")


@dataclass(frozen=True)
class ComplaintDraft:
    content: str
    source: Literal["model", "fallback"]
    failure: str | None = None


class ComplaintPipeline:
    """Generate complaint records; persistence is left to the caller."""

    def __init__(
        self,
        orchestrator: QueryOrchestrator,
        store: BaseRecordStore | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._orchestrator = orchestrator
        self._store = store
        self._settings = settings or Settings()
        self._clock = clock

    async def generate(self, request: ComplaintRequest, timeout_s: float | None = None) -> Complaint:
        """Build a draft complaint for ``request``.

        Raises:
            ValidationError: Agency missing, or neither document nor id given.
            NotFoundError: ``document_id`` does not exist in the store.
        """
        agency = (request.agency or "").strip()
        if not agency:
            raise ValidationError("Agency is required")

        main_record = await self._resolve_main(request)
        set_document_context(main_record.id)
        related_records = await self._resolve_related(request, main_record)
        logger.info(
            "Generating complaint to %s for document %s with %d related documents",
            agency, main_record.id, len(related_records),
        )

        main = ComplaintDocument.from_record(main_record, COMPLAINT_MAIN_TEXT_LIMIT)
        related = [
            ComplaintDocument.from_record(r, COMPLAINT_RELATED_TEXT_LIMIT)
            for r in related_records
        ]
        deadline = time.monotonic() + timeout_s if timeout_s is not None else None
        draft = await self._draft(agency, main, related, deadline)
        if draft.source == "fallback":
            logger.warning("Complaint to %s uses fallback template: %s", agency, draft.failure)

        now = self._clock()
        return Complaint(
            document_id=request.document_id or main_record.id,
            agency=agency,
            content=draft.content,
            related_document_ids=[r.id for r in related_records],
            status="draft",
            created_at=now,
            updated_at=now,
            analysis=ComplaintAnalysis(violations=list(main_record.violations)),
        )

    async def _resolve_main(self, request: ComplaintRequest) -> DocumentRecord:
        if request.main_document is not None:
            return request.main_document
        if not request.document_id:
            raise ValidationError("Either mainDocument or documentId is required")
        doc = await self._store.find_document(request.document_id) if self._store else None
        if doc is None:
            raise NotFoundError(request.document_id)
        return doc

    async def _resolve_related(
        self, request: ComplaintRequest, main: DocumentRecord,
    ) -> list[DocumentRecord]:
        """Explicit list, else store documents dated on or before the subject."""
        if request.related_documents is not None:
            return list(request.related_documents)
        if self._store is None:
            return []
        subject_date = main.effective_date
        if subject_date is None:
            logger.info("Document %s has no date; no related documents selected", main.id)
            return []

        excluded = {main.id, request.document_id}

        def is_related(doc: DocumentRecord) -> bool:
            doc_date = doc.effective_date
            return doc.id not in excluded and doc_date is not None and doc_date <= subject_date

        return await self._store.list_documents(is_related)

    async def _draft(
        self,
        agency: str,
        main: ComplaintDocument,
        related: list[ComplaintDocument],
        deadline: float | None,
    ) -> ComplaintDraft:
        prompt = build_complaint_prompt(agency, main, related)
        options = QueryOptions(
            temperature=self._settings.complaint_temperature,
            max_tokens=self._settings.complaint_max_tokens,
            response_format="json",
            task_type="complaint",
        )
        try:
            parsed = await self._orchestrator.query(prompt, options, deadline=deadline)
        except Exception as e:  # noqa: BLE001 - any model failure maps to the fallback
            return self._fallback(agency, main, f"{type(e).__name__}: {e}")

        content = extract_content(parsed)
        if content is None:
            return self._fallback(agency, main, f"no usable content (keys: {sorted(parsed)})")
        return ComplaintDraft(content=content, source="model")

    def _fallback(self, agency: str, main: ComplaintDocument, failure: str) -> ComplaintDraft:
        content = build_fallback_complaint(agency, main, today=self._clock().date())
        return ComplaintDraft(content=content, source="fallback", failure=failure)


def extract_content(parsed: dict[str, Any]) -> str | None:
    """Complaint text from a normalized reply; None if absent or still raw JSON."""
    for key in _CONTENT_KEYS:
        value = parsed.get(key)
        if isinstance(value, str):
            text = value.strip()
            if text and not text.startswith("{"):
                return text
    return None
