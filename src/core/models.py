# src/core/models.py - v3
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Python attributes are snake_case, the wire form (store files, model replies,
decoded request bodies) is camelCase via the alias generator.
"""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_DOTTED_DATE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")


def parse_document_date(value: Any) -> date | None:
    """Coerce DD.MM.YYYY, YYYY-MM-DD or ISO datetime input into a date.

    Unparsable and empty values yield None instead of raising: model replies
    routinely contain "Не указана" or free text in date fields.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    match = _DOTTED_DATE.match(text)
    try:
        if match:
            day, month, year = (int(g) for g in match.groups())
            return date(year, month, day)
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === ANALYSIS ===


class Violation(CamelModel):
    """A legal violation detected in a document."""

    law: str = ""
    article: str = ""
    description: str = ""
    evidence_quote: str = ""

    @field_validator("law", "article", "description", "evidence_quote", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class AnalysisResult(CamelModel):
    """Structured analysis of one piece of legal text."""

    summary: str
    key_excerpts: list[str] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    document_date: date | None = None
    sender_agency: str | None = None

    @field_validator("document_date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> date | None:
        return parse_document_date(v)


class AttachmentAnalysis(CamelModel):
    """Classification result for a single attachment."""

    id: str = ""
    document_type: str = ""
    sent_date: str = ""
    sender_agency: str = ""
    summary: str = ""
    key_excerpts: list[str] = Field(default_factory=list)


class DocumentAnalysis(AnalysisResult):
    """Main-text analysis plus per-attachment results."""

    attachments: list[AttachmentAnalysis] = Field(default_factory=list)


# === STORE RECORDS ===


class Attachment(CamelModel):
    """File attached to a document, with text already extracted upstream."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    text: str = ""

    @field_validator("name", "text", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return "" if v is None else v


class DocumentRecord(CamelModel):
    """Document as held by the record store."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    original_text: str = ""
    summary: str = ""
    # Older records keep excerpts under keySentences.
    key_excerpts: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("keyExcerpts", "keySentences", "key_excerpts"),
        serialization_alias="keyExcerpts",
    )
    violations: list[Violation] = Field(default_factory=list)
    document_date: date | None = None
    sender_agency: str | None = None
    date_received: date | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    complaints: list[str] = Field(default_factory=list)

    @field_validator("document_date", "date_received", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> date | None:
        return parse_document_date(v)

    @field_validator("original_text", "summary", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("key_excerpts", "violations", "attachments", "complaints", mode="before")
    @classmethod
    def _drop_nulls(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [item for item in v if item is not None]
        return v

    @property
    def effective_date(self) -> date | None:
        """Date used for chronological selection of related documents."""
        return self.document_date or self.date_received


class ComplaintDocument(CamelModel):
    """Uniform, fully defaulted document view fed to the complaint prompt."""

    id: str = ""
    original_text: str = ""
    summary: str = ""
    key_excerpts: list[str] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    document_date: str = ""
    sender_agency: str = ""

    @classmethod
    def from_record(cls, record: DocumentRecord, text_limit: int | None = None) -> ComplaintDocument:
        text = record.original_text or ""
        if text_limit is not None:
            text = text[:text_limit]
        doc_date = record.effective_date
        return cls(
            id=record.id or "",
            original_text=text,
            summary=record.summary or "",
            key_excerpts=[e for e in record.key_excerpts if e],
            violations=list(record.violations),
            document_date=doc_date.isoformat() if doc_date else "",
            sender_agency=record.sender_agency or "",
        )


# === COMPLAINTS ===


class ComplaintRequest(CamelModel):
    """Decoded complaint-generation request.

    ``related_documents=None`` means "derive from the store", an empty list
    means "no related documents".
    """

    agency: str = ""
    document_id: str | None = None
    main_document: DocumentRecord | None = None
    related_documents: list[DocumentRecord] | None = None


class ComplaintAnalysis(CamelModel):
    violations: list[Violation] = Field(default_factory=list)


class Complaint(CamelModel):
    """Generated complaint. Never mutated by the core after construction."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    document_id: str
    agency: str
    content: str
    related_document_ids: list[str] = Field(default_factory=list)
    status: Literal["draft", "final"] = "draft"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    analysis: ComplaintAnalysis = Field(default_factory=ComplaintAnalysis)
