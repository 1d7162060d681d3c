# src/prompts/builder.py - v1
"""Pure prompt assembly for analysis, complaint and attachment tasks.

No I/O. Input text is cut by raw character count from the start; this bounds
prompt size and cost, it does not respect sentence boundaries.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from jurisdraft.core.models import ComplaintDocument
from jurisdraft.prompts.templates import (
    ANALYSIS_TEMPLATE,
    ATTACHMENT_TEMPLATE,
    COMPLAINT_TEMPLATE,
    INSTRUCTIONS_BLOCK,
    STATUTE_CHECKLIST,
)

ANALYSIS_TEXT_LIMIT = 10_000
COMPLAINT_MAIN_TEXT_LIMIT = 5_000
COMPLAINT_RELATED_TEXT_LIMIT = 2_000
ATTACHMENT_TEXT_LIMIT = 7_000

MAX_COMPLAINT_EXCERPTS = 10

NORMAL_TEMPERATURE = 0.3
STRICT_TEMPERATURE = 0.1

_DATE_PLACEHOLDER = "Не указана"


def truncate_text(text: str | None, limit: int) -> str:
    """Return at most the first ``limit`` characters of ``text``."""
    if not text:
        return ""
    return text[:limit]


def analysis_temperature(strict: bool, strict_value: float = STRICT_TEMPERATURE,
                         normal_value: float = NORMAL_TEMPERATURE) -> float:
    """Strict analysis lowers sampling temperature; the prompt text is unchanged."""
    return strict_value if strict else normal_value


def _instructions_block(instructions: str | None) -> str:
    if not instructions or not instructions.strip():
        return ""
    return INSTRUCTIONS_BLOCK.format(instructions=instructions.strip())


def build_analysis_prompt(text: str, instructions: str = "") -> str:
    checklist = "\n".join(f"   - {law}" for law in STATUTE_CHECKLIST)
    return ANALYSIS_TEMPLATE.format(
        checklist=checklist,
        instructions=_instructions_block(instructions),
        text=truncate_text(text, ANALYSIS_TEXT_LIMIT),
    )


def build_attachment_prompt(text: str, instructions: str = "") -> str:
    return ATTACHMENT_TEMPLATE.format(
        instructions=_instructions_block(instructions),
        text=truncate_text(text, ATTACHMENT_TEXT_LIMIT),
    )


def _violations_payload(doc: ComplaintDocument) -> list[dict[str, str]]:
    return [
        v.model_dump(by_alias=True, exclude_defaults=True)
        for v in doc.violations
    ]


def build_complaint_payload(
    agency: str,
    main: ComplaintDocument,
    related: Sequence[ComplaintDocument] = (),
) -> dict[str, Any]:
    """Condensed, size-bounded view of the complaint inputs.

    Related documents contribute their count, dates and violations only,
    never their text.
    """
    payload: dict[str, Any] = {
        "agency": agency,
        "document": {
            "summary": main.summary,
            "keyExcerpts": main.key_excerpts[:MAX_COMPLAINT_EXCERPTS],
            "violations": _violations_payload(main),
            "documentDate": main.document_date or _DATE_PLACEHOLDER,
            "senderAgency": main.sender_agency,
            "text": truncate_text(main.original_text, COMPLAINT_MAIN_TEXT_LIMIT),
        },
        "relatedDocumentsCount": len(related),
    }
    if related:
        payload["relatedDocuments"] = [
            {
                "documentDate": doc.document_date or _DATE_PLACEHOLDER,
                "violations": _violations_payload(doc),
            }
            for doc in related
        ]
    return payload


def build_complaint_prompt(
    agency: str,
    main: ComplaintDocument,
    related: Sequence[ComplaintDocument] = (),
) -> str:
    payload = build_complaint_payload(agency, main, related)
    return COMPLAINT_TEMPLATE.format(
        agency=agency,
        payload=json.dumps(payload, ensure_ascii=False, indent=2),
    )
