# src/complaint/fallback.py - v1
"""Deterministic complaint template used whenever model generation fails."""

from __future__ import annotations

from datetime import date

from jurisdraft.core.models import ComplaintDocument, parse_document_date

NO_SUMMARY = "Без описания"
NO_DATE = "Не указана"
REVIEW_REQUEST = (
    "Прошу провести проверку изложенных обстоятельств, принять меры к устранению "
    "выявленных нарушений и сообщить мне о результатах рассмотрения жалобы "
    "в установленный законом срок."
)


def _format_date(value: str) -> str:
    parsed = parse_document_date(value)
    return parsed.strftime("%d.%m.%Y") if parsed else NO_DATE


def build_fallback_complaint(agency: str, document: ComplaintDocument, today: date) -> str:
    """Complaint text that starts with ``"Жалоба в {agency}"`` and is never empty."""
    lines = [
        f"Жалоба в {agency}",
        "",
        f"Документ: {document.summary.strip() or NO_SUMMARY}",
        f"Дата документа: {_format_date(document.document_date)}",
    ]
    if document.sender_agency:
        lines.append(f"Отправитель: {document.sender_agency}")

    if document.violations:
        lines += ["", "Выявленные нарушения:"]
        for v in document.violations:
            ref = " ".join(part for part in (v.article, v.law) if part)
            lines.append(f"  - {ref}: {v.description}" if ref else f"  - {v.description}")

    lines += ["", REVIEW_REQUEST, "", f"Дата: {today.strftime('%d.%m.%Y')}"]
    return "\n".join(lines)
