# tests/unit/cache/test_unit_json_store.py - v2
"""Tests for cache/json_store.py."""

from __future__ import annotations

import os

import pytest

from jurisdraft.cache.json_store import JsonCacheStore
from jurisdraft.core.models import AnalysisResult, Violation


class TestJsonCacheStore:
    @pytest.mark.asyncio
    async def test_put_get_survives_new_instance(self, tmp_path):
        result = AnalysisResult(
            summary="Суть", violations=[Violation(law="ЗПП", article="ст. 25")],
            document_date="2024-01-01",
        )
        await JsonCacheStore(tmp_path).put("k", result)
        loaded = await JsonCacheStore(tmp_path).get("k")
        assert loaded == result

    @pytest.mark.asyncio
    async def test_corrupt_file_is_miss(self, tmp_path):
        store = JsonCacheStore(tmp_path)
        (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_evicts_oldest(self, tmp_path):
        store = JsonCacheStore(tmp_path, max_entries=2)
        await store.put("a", AnalysisResult(summary="a"))
        os.utime(tmp_path / "a.json", (1, 1))
        await store.put("b", AnalysisResult(summary="b"))
        await store.put("c", AnalysisResult(summary="c"))
        assert await store.size() == 2
        assert await store.get("a") is None

    @pytest.mark.asyncio
    async def test_key_with_slash(self, tmp_path):
        store = JsonCacheStore(tmp_path)
        await store.put("a/b", AnalysisResult(summary="s"))
        assert (tmp_path / "a_b.json").exists()

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, tmp_path):
        store = JsonCacheStore(tmp_path)
        await store.put("a", AnalysisResult(summary="a"))
        await store.put("b", AnalysisResult(summary="b"))
        await store.delete("a")
        assert await store.size() == 1
        await store.clear()
        assert await store.size() == 0
