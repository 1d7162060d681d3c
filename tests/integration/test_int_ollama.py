# tests/integration/test_int_ollama.py - v1
"""End-to-end checks against a live Ollama server.

Skipped unless OLLAMA_INTEGRATION_URL points at a reachable server with
OLLAMA_MODEL (or the default model) pulled.
"""

from __future__ import annotations

import os

import pytest

from jurisdraft.api.facade import analyze_text, build_services, check_status, generate_complaint
from jurisdraft.config.settings import Settings
from jurisdraft.core.models import DocumentRecord

pytestmark = [
    pytest.mark.ollama,
    pytest.mark.skipif(
        not os.environ.get("OLLAMA_INTEGRATION_URL"),
        reason="OLLAMA_INTEGRATION_URL not set",
    ),
]


@pytest.fixture
def live_services(tmp_path):
    settings = Settings(
        _env_file=None,
        ollama_base_url=os.environ.get("OLLAMA_INTEGRATION_URL", ""),
        store_path=tmp_path / "db.json",
        llm_timeout_s=600,
    )
    return build_services(settings)


class TestLiveOllama:
    @pytest.mark.asyncio
    async def test_status_ready(self, live_services):
        assert (await check_status(live_services)).status == "ready"

    @pytest.mark.asyncio
    async def test_analysis_has_summary(self, live_services):
        result = await analyze_text(
            "Арендодатель запрещает арендатору держать кошек и грозит расторжением договора.",
            services=live_services,
        )
        assert result.summary.strip()

    @pytest.mark.asyncio
    async def test_complaint_never_empty(self, live_services):
        complaint = await generate_complaint(
            {"agency": "Роспотребнадзор",
             "mainDocument": DocumentRecord(id="d1", original_text="Магазин отказал в возврате товара.")},
            services=live_services,
        )
        assert complaint.content.strip()
        assert complaint.status == "draft"
