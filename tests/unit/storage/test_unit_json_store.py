# tests/unit/storage/test_unit_json_store.py - v2
"""Tests for storage/json_store.py."""

from __future__ import annotations

import asyncio
import json

import pytest

from jurisdraft.core.errors import NotFoundError
from jurisdraft.core.models import Complaint, DocumentRecord
from jurisdraft.storage.json_store import JsonRecordStore


class TestDocuments:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, store):
        assert await store.list_documents() == []
        assert await store.find_document("x") is None

    @pytest.mark.asyncio
    async def test_put_and_find(self, store, sample_document):
        await store.put_document(sample_document)
        found = await store.find_document("doc-main")
        assert found == sample_document

    @pytest.mark.asyncio
    async def test_put_replaces_existing(self, store):
        await store.put_document(DocumentRecord(id="d1", summary="old"))
        await store.put_document(DocumentRecord(id="d1", summary="new"))
        docs = await store.list_documents()
        assert [d.summary for d in docs] == ["new"]

    @pytest.mark.asyncio
    async def test_predicate(self, store):
        await store.put_document(DocumentRecord(id="a", sender_agency="ФССП"))
        await store.put_document(DocumentRecord(id="b", sender_agency="ФНС"))
        docs = await store.list_documents(lambda d: d.sender_agency == "ФНС")
        assert [d.id for d in docs] == ["b"]

    @pytest.mark.asyncio
    async def test_reads_existing_camel_case_file(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "documents": [{
                "id": "d1",
                "originalText": "Текст",
                "documentDate": "15.03.2024",
                "dateReceived": "2024-03-20T10:00:00.000Z",
                "analysisStatus": "completed",
            }],
        }, ensure_ascii=False), encoding="utf-8")
        doc = await JsonRecordStore(path).find_document("d1")
        assert doc.original_text == "Текст"
        assert doc.effective_date.isoformat() == "2024-03-15"

    @pytest.mark.asyncio
    async def test_list_tolerates_null_fields(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "documents": [
                {"id": "old", "documentDate": "2024-01-01", "keyExcerpts": None, "violations": None},
                {"id": "subject", "documentDate": "2024-02-01"},
            ],
        }), encoding="utf-8")
        docs = await JsonRecordStore(path).list_documents()
        assert [d.id for d in docs] == ["old", "subject"]
        assert docs[0].key_excerpts == []

    @pytest.mark.asyncio
    async def test_written_file_is_camel_case_utf8(self, store, sample_document):
        await store.put_document(sample_document)
        raw = store.path.read_text(encoding="utf-8")
        assert '"originalText"' in raw
        assert "судебного пристава" in raw
        assert not store.path.with_suffix(".json.tmp").exists()


class TestComplaints:
    @pytest.mark.asyncio
    async def test_append_and_list(self, store):
        complaint = Complaint(document_id="d1", agency="ФССП", content="Жалоба")
        await store.append_complaint(complaint)
        assert await store.list_complaints() == [complaint]

    @pytest.mark.asyncio
    async def test_link_to_document(self, store):
        await store.put_document(DocumentRecord(id="d1"))
        await store.link_complaint_to_document("d1", "c1")
        await store.link_complaint_to_document("d1", "c2")
        doc = await store.find_document("d1")
        assert doc.complaints == ["c1", "c2"]

    @pytest.mark.asyncio
    async def test_link_to_document_with_null_complaints(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"documents": [{"id": "d1", "complaints": None}]}), encoding="utf-8")
        store = JsonRecordStore(path)
        await store.link_complaint_to_document("d1", "c1")
        doc = await store.find_document("d1")
        assert doc.complaints == ["c1"]

    @pytest.mark.asyncio
    async def test_link_unknown_document(self, store):
        with pytest.raises(NotFoundError):
            await store.link_complaint_to_document("missing", "c1")

    @pytest.mark.asyncio
    async def test_concurrent_appends_not_lost(self, store):
        complaints = [Complaint(document_id="d1", agency="ФССП", content=str(i)) for i in range(10)]
        await asyncio.gather(*(store.append_complaint(c) for c in complaints))
        stored = await store.list_complaints()
        assert sorted(c.content for c in stored) == sorted(str(i) for i in range(10))
