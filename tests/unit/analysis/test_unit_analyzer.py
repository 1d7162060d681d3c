# tests/unit/analysis/test_unit_analyzer.py - v2
"""Tests for analysis/analyzer.py."""

from __future__ import annotations

import time
from datetime import date

import pytest

from jurisdraft.analysis.analyzer import (
    EMPTY_TEXT_SUMMARY,
    FAILURE_SUMMARY_PREFIX,
    LegalAnalyzer,
    apply_deterministic_fields,
    coerce_analysis,
)
from jurisdraft.cache.memory_store import MemoryCacheStore
from jurisdraft.core.errors import InvalidResponse, TransportError
from jurisdraft.core.models import AnalysisResult

_REPLY = (
    '{"summary": "Запрет на содержание животных", "keyExcerpts": ["запрещает держать кошек"],'
    ' "violations": [{"law": "ЗПП", "article": "ст. 25 ЗПП", "description": "Необоснованное ограничение"}]}'
)


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_violation_article_preserved(self, make_orchestrator, settings):
        orch, _ = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, settings=settings)
        result = await analyzer.analyze("Арендодатель запрещает держать кошек", "", False)
        assert result.summary == "Запрет на содержание животных"
        assert [v.article for v in result.violations] == ["ст. 25 ЗПП"]
        assert result.key_excerpts == ["запрещает держать кошек"]

    @pytest.mark.asyncio
    async def test_blank_text_skips_model(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        result = await LegalAnalyzer(orch, settings=settings).analyze("   \n")
        assert result.summary == EMPTY_TEXT_SUMMARY
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_cache_hit_skips_second_call(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, cache=MemoryCacheStore(), settings=settings)
        first = await analyzer.analyze("Арендодатель запрещает держать кошек", "проверить ЗПП")
        second = await analyzer.analyze("Арендодатель запрещает держать кошек", "проверить ЗПП")
        assert first == second
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_different_instructions_miss(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, cache=MemoryCacheStore(), settings=settings)
        await analyzer.analyze("текст", "a")
        await analyzer.analyze("текст", "b")
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_strict_mode_lowers_temperature(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, settings=settings)
        await analyzer.analyze("текст", strict_mode=True)
        await analyzer.analyze("другой текст", strict_mode=False)
        assert [c.temperature for c in backend.calls] == [0.1, 0.3]

    @pytest.mark.asyncio
    async def test_transport_failure_gives_placeholder(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(TransportError("connection refused"))
        cache = MemoryCacheStore()
        result = await LegalAnalyzer(orch, cache=cache, settings=settings).analyze("текст")
        assert result.summary.startswith(FAILURE_SUMMARY_PREFIX)
        assert "connection refused" in result.summary
        assert len(backend.calls) == 3
        assert await cache.size() == 0

    @pytest.mark.asyncio
    async def test_missing_summary_gives_placeholder(self, make_orchestrator, settings):
        orch, _ = make_orchestrator('{"violations": []}')
        result = await LegalAnalyzer(orch, settings=settings).analyze("текст")
        assert result.summary.startswith(FAILURE_SUMMARY_PREFIX)

    @pytest.mark.asyncio
    async def test_deterministic_fields_override_model(self, make_orchestrator, settings):
        orch, _ = make_orchestrator(
            '{"summary": "s", "documentDate": "01.01.2020", "senderAgency": "Неизвестно"}'
        )
        text = "Постановление судебного пристава от 15.03.2024"
        result = await LegalAnalyzer(orch, settings=settings).analyze(text)
        assert result.document_date == date(2024, 3, 15)
        assert result.sender_agency == "ФССП"

    @pytest.mark.asyncio
    async def test_passed_deadline_gives_placeholder(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, settings=settings)
        result = await analyzer.analyze("текст", deadline=time.monotonic() - 1)
        assert result.summary.startswith(FAILURE_SUMMARY_PREFIX)
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_earlier_of_timeout_and_deadline_wins(self, make_orchestrator, settings):
        orch, backend = make_orchestrator(_REPLY)
        analyzer = LegalAnalyzer(orch, settings=settings)
        result = await analyzer.analyze("текст", timeout_s=60, deadline=time.monotonic() - 1)
        assert result.summary.startswith(FAILURE_SUMMARY_PREFIX)
        assert backend.calls == []


class TestCoerceAnalysis:
    def test_alternative_keys(self):
        result = coerce_analysis({
            "summary": " s ",
            "keySentences": ["one", "", "two"],
            "violations": [{"law": "ГК РФ", "quote": "цитата"}, "not a dict"],
        })
        assert result.summary == "s"
        assert result.key_excerpts == ["one", "two"]
        assert len(result.violations) == 1
        assert result.violations[0].evidence_quote == "цитата"

    def test_single_violation_object(self):
        result = coerce_analysis({"summary": "s", "violations": {"article": "ст. 1"}})
        assert result.violations[0].article == "ст. 1"

    def test_free_text_reply_rejected(self):
        with pytest.raises(InvalidResponse):
            coerce_analysis({"response": "просто текст"})

    def test_model_values_kept_without_matches(self):
        result = apply_deterministic_fields(
            AnalysisResult(summary="s", document_date="2024-01-01", sender_agency="УК"),
            "Текст без дат и ведомств",
        )
        assert result.document_date == date(2024, 1, 1)
        assert result.sender_agency == "УК"
