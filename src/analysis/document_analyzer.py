# src/analysis/document_analyzer.py - v2
"""Document analysis: main text plus each attachment, one at a time.

Attachments run sequentially to bound load on the shared model backend.
A failing attachment degrades to a placeholder; the batch always completes.
One deadline covers the main text and every attachment, so once it passes
the remaining attachments become placeholders without a model call.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from jurisdraft.analysis.analyzer import LegalAnalyzer
from jurisdraft.core.errors import DecodeError, QueryError
from jurisdraft.core.models import Attachment, AttachmentAnalysis, DocumentAnalysis, DocumentRecord
from jurisdraft.llm.models import QueryOptions
from jurisdraft.llm.query_orchestrator import QueryOrchestrator
from jurisdraft.logging.context import set_document_context
from jurisdraft.prompts.builder import build_attachment_prompt

logger = logging.getLogger(__name__)

NO_TEXT_SUMMARY = "Документ не содержит текста для анализа"
UNKNOWN_TYPE = "Неизвестный тип"
ATTACHMENT_FAILURE_PREFIX = "Ошибка анализа вложения: "
ATTACHMENT_NO_SUMMARY = "Не удалось сгенерировать краткую суть"


class DocumentAnalyzer:
    """Analyze a stored document together with its attachments."""

    def __init__(self, analyzer: LegalAnalyzer, orchestrator: QueryOrchestrator) -> None:
        self._analyzer = analyzer
        self._orchestrator = orchestrator

    async def analyze_document(
        self,
        document: DocumentRecord,
        instructions: str = "",
        strict_mode: bool = False,
        timeout_s: float | None = None,
    ) -> DocumentAnalysis:
        set_document_context(document.id)
        deadline = time.monotonic() + timeout_s if timeout_s is not None else None
        logger.info(
            "Analyzing document %s (%d chars, %d attachments)",
            document.id, len(document.original_text), len(document.attachments),
        )

        if document.original_text.strip():
            main = await self._analyzer.analyze(
                document.original_text, instructions, strict_mode, deadline=deadline,
            )
            analysis = DocumentAnalysis(**main.model_dump())
        else:
            analysis = DocumentAnalysis(summary=NO_TEXT_SUMMARY)

        for attachment in document.attachments:
            if not attachment.text.strip():
                logger.info("Attachment %s has no text, skipped", attachment.id)
                continue
            analysis.attachments.append(
                await self.analyze_attachment(attachment, instructions, deadline=deadline),
            )

        return analysis

    async def analyze_attachment(
        self,
        attachment: Attachment,
        instructions: str = "",
        deadline: float | None = None,
    ) -> AttachmentAnalysis:
        """Classify one attachment; failures yield a placeholder for it alone."""
        prompt = build_attachment_prompt(attachment.text.strip(), instructions)
        try:
            parsed = await self._orchestrator.query(
                prompt,
                QueryOptions(response_format="json", task_type="attachment"),
                deadline=deadline,
            )
        except (QueryError, DecodeError) as e:
            logger.warning("Attachment %s analysis failed: %s", attachment.id, e)
            return AttachmentAnalysis(
                id=attachment.id,
                document_type=UNKNOWN_TYPE,
                summary=f"{ATTACHMENT_FAILURE_PREFIX}{e}",
            )
        return coerce_attachment(attachment.id, parsed)


def coerce_attachment(attachment_id: str, parsed: dict[str, Any]) -> AttachmentAnalysis:
    excerpts = parsed.get("keyExcerpts") or parsed.get("keySentences") or []
    if not isinstance(excerpts, list):
        excerpts = [excerpts]
    return AttachmentAnalysis(
        id=attachment_id,
        document_type=_str(parsed.get("documentType")) or UNKNOWN_TYPE,
        sent_date=_str(parsed.get("sentDate")),
        sender_agency=_str(parsed.get("senderAgency")),
        summary=_str(parsed.get("summary")) or ATTACHMENT_NO_SUMMARY,
        key_excerpts=[_str(e) for e in excerpts if _str(e)],
    )


def _str(value: Any) -> str:
    return "" if value is None else str(value).strip()
