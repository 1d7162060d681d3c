# src/storage/json_store.py - v2
"""Single-file JSON record store: ``{"documents": [...], "complaints": [...]}``.

Every write re-reads and replaces the whole file (temp file + rename).
An asyncio.Lock serializes read/replace cycles within one process; there is
no protection against other processes writing the same file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from jurisdraft.core.errors import NotFoundError
from jurisdraft.core.models import Complaint, DocumentRecord
from jurisdraft.storage.base_store import BaseRecordStore, DocumentPredicate

logger = logging.getLogger(__name__)


class JsonRecordStore(BaseRecordStore):
    """Whole-file JSON store."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def find_document(self, document_id: str) -> DocumentRecord | None:
        async with self._lock:
            data = self._load()
        for raw in data["documents"]:
            if raw.get("id") == document_id:
                return DocumentRecord.model_validate(raw)
        return None

    async def list_documents(self, predicate: DocumentPredicate | None = None) -> list[DocumentRecord]:
        async with self._lock:
            data = self._load()
        docs = [DocumentRecord.model_validate(raw) for raw in data["documents"]]
        if predicate is None:
            return docs
        return [d for d in docs if predicate(d)]

    async def put_document(self, document: DocumentRecord) -> None:
        async with self._lock:
            data = self._load()
            raw = _dump(document)
            for i, existing in enumerate(data["documents"]):
                if existing.get("id") == document.id:
                    data["documents"][i] = raw
                    break
            else:
                data["documents"].append(raw)
            self._save(data)

    async def append_complaint(self, complaint: Complaint) -> None:
        async with self._lock:
            data = self._load()
            data["complaints"].append(_dump(complaint))
            self._save(data)
        logger.info("Complaint %s stored for document %s", complaint.id, complaint.document_id)

    async def link_complaint_to_document(self, document_id: str, complaint_id: str) -> None:
        async with self._lock:
            data = self._load()
            for raw in data["documents"]:
                if raw.get("id") == document_id:
                    if not isinstance(raw.get("complaints"), list):
                        raw["complaints"] = []
                    raw["complaints"].append(complaint_id)
                    break
            else:
                raise NotFoundError(document_id)
            self._save(data)

    async def list_complaints(self) -> list[Complaint]:
        async with self._lock:
            data = self._load()
        return [Complaint.model_validate(raw) for raw in data["complaints"]]

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self._path.exists():
            return {"documents": [], "complaints": []}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        data.setdefault("documents", [])
        data.setdefault("complaints", [])
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)


def _dump(model: DocumentRecord | Complaint) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)
