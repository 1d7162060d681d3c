# tests/conftest.py - v2
"""Shared test fixtures for all unit tests.

Provides a scripted model backend, settings isolated from any .env file,
an orchestrator without backoff delays, and a temp record store.
No network access: every model reply is scripted.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from jurisdraft.config.settings import Settings
from jurisdraft.core.models import DocumentRecord, Violation
from jurisdraft.llm.base_client import BaseModelBackend
from jurisdraft.llm.models import BackendReply, GenerateRequest
from jurisdraft.llm.query_orchestrator import QueryOrchestrator
from jurisdraft.llm.retry import RetryPolicy
from jurisdraft.storage.json_store import JsonRecordStore


class FakeBackend(BaseModelBackend):
    """Backend replaying a script of payloads or exceptions, one per call.

    A str or dict item becomes the reply payload (strings are wrapped in the
    ``{"response": ...}`` envelope); an exception item is raised. The last
    item repeats once the script runs out.
    """

    def __init__(self, *script: Any, available: bool = True) -> None:
        self.script = list(script) or [{"response": "{}"}]
        self.calls: list[GenerateRequest] = []
        self.available = available

    async def generate(self, request: GenerateRequest) -> BackendReply:
        self.calls.append(request)
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        payload = {"response": item} if isinstance(item, str) else item
        return BackendReply(payload=payload, model=request.model, provider="fake", latency_ms=1)

    async def probe(self) -> bool:
        return self.available

    @property
    def provider_name(self) -> str:
        return "fake"


# === FIXTURES: Configuration ===


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        cache_root=tmp_path / "cache",
        store_path=tmp_path / "db.json",
        llm_retry_base_delay_s=0,
    )


@pytest.fixture
def no_delay_policy() -> RetryPolicy:
    return RetryPolicy(max_retries=2, base_delay_s=0)


# === FIXTURES: Model ===


@pytest.fixture
def backend_cls() -> type[FakeBackend]:
    return FakeBackend


@pytest.fixture
def make_orchestrator(settings, no_delay_policy):
    """Factory: orchestrator over a FakeBackend scripted with ``script``."""

    def _make(*script: Any) -> tuple[QueryOrchestrator, FakeBackend]:
        backend = FakeBackend(*script)
        return QueryOrchestrator(backend, settings, retry_policy=no_delay_policy), backend

    return _make


# === FIXTURES: Store and documents ===


@pytest.fixture
def store(tmp_path) -> JsonRecordStore:
    return JsonRecordStore(tmp_path / "db.json")


@pytest.fixture
def sample_document() -> DocumentRecord:
    return DocumentRecord(
        id="doc-main",
        original_text="Постановление судебного пристава от 15.03.2024 о взыскании задолженности.",
        summary="Постановление о взыскании задолженности",
        key_excerpts=["о взыскании задолженности"],
        violations=[
            Violation(
                law="ФЗ «Об исполнительном производстве»",
                article="ст. 24",
                description="Должник не уведомлен о возбуждении производства",
                evidence_quote="о взыскании задолженности",
            )
        ],
        document_date=date(2024, 3, 15),
        sender_agency="ФССП",
    )
