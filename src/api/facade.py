# src/api/facade.py - v3
"""Public API facade: one entry point per operation.

Usage:
    from jurisdraft.api.facade import build_services, generate_complaint
    services = build_services()
    complaint = await generate_complaint({"agency": "ФССП", "documentId": "d1"}, services)

Callers pass request bodies already decoded into plain data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from jurisdraft.analysis.analyzer import LegalAnalyzer
from jurisdraft.analysis.document_analyzer import DocumentAnalyzer
from jurisdraft.api.models import StatusReport
from jurisdraft.cache.base_cache_store import BaseCacheStore
from jurisdraft.cache.cache_factory import create_cache_store
from jurisdraft.complaint.pipeline import ComplaintPipeline
from jurisdraft.config.settings import Settings
from jurisdraft.core.errors import NotFoundError
from jurisdraft.core.models import AnalysisResult, Complaint, ComplaintRequest, DocumentAnalysis
from jurisdraft.llm.base_client import BaseModelBackend
from jurisdraft.llm.client_factory import create_backend
from jurisdraft.llm.query_orchestrator import QueryOrchestrator
from jurisdraft.logging.context import set_request_context
from jurisdraft.storage.base_store import BaseRecordStore
from jurisdraft.storage.json_store import JsonRecordStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired component graph shared by all requests of one process."""

    settings: Settings
    backend: BaseModelBackend
    orchestrator: QueryOrchestrator
    cache: BaseCacheStore | None
    store: BaseRecordStore
    analyzer: LegalAnalyzer
    document_analyzer: DocumentAnalyzer
    complaints: ComplaintPipeline


def build_services(
    settings: Settings | None = None,
    backend: BaseModelBackend | None = None,
    store: BaseRecordStore | None = None,
    cache: BaseCacheStore | None = None,
) -> Services:
    """Wire components from settings; explicit arguments replace the defaults."""
    settings = settings or Settings()
    backend = backend or create_backend(settings=settings)
    store = store or JsonRecordStore(settings.store_path)
    if cache is None:
        cache = create_cache_store(settings)

    orchestrator = QueryOrchestrator(backend, settings)
    analyzer = LegalAnalyzer(orchestrator, cache=cache, settings=settings)
    return Services(
        settings=settings,
        backend=backend,
        orchestrator=orchestrator,
        cache=cache,
        store=store,
        analyzer=analyzer,
        document_analyzer=DocumentAnalyzer(analyzer, orchestrator),
        complaints=ComplaintPipeline(orchestrator, store=store, settings=settings),
    )


async def analyze_text(
    text: str,
    instructions: str = "",
    strict_mode: bool = False,
    services: Services | None = None,
    timeout_s: float | None = None,
) -> AnalysisResult:
    """Analyze free text. Model failures come back as a placeholder summary."""
    services = services or build_services()
    set_request_context()
    if not await services.orchestrator.is_available():
        logger.warning("Model backend did not answer the status probe; querying anyway")
    return await services.analyzer.analyze(text, instructions, strict_mode, timeout_s=timeout_s)


async def analyze_document(
    document_id: str,
    instructions: str = "",
    strict_mode: bool = False,
    services: Services | None = None,
    timeout_s: float | None = None,
) -> DocumentAnalysis:
    """Analyze a stored document and its attachments, then save the results on it.

    Raises:
        NotFoundError: No document with ``document_id``.
    """
    services = services or build_services()
    set_request_context()
    document = await services.store.find_document(document_id)
    if document is None:
        raise NotFoundError(document_id)

    analysis = await services.document_analyzer.analyze_document(
        document, instructions, strict_mode, timeout_s=timeout_s,
    )
    updated = document.model_copy(update={
        "summary": analysis.summary,
        "key_excerpts": analysis.key_excerpts,
        "violations": analysis.violations,
        "document_date": analysis.document_date or document.document_date,
        "sender_agency": analysis.sender_agency or document.sender_agency,
    })
    await services.store.put_document(updated)
    return analysis


async def generate_complaint(
    request: ComplaintRequest | dict[str, Any],
    services: Services | None = None,
    timeout_s: float | None = None,
) -> Complaint:
    """Generate a complaint, append it to the store and link it to its document.

    Model failures never surface here (fallback template); validation,
    not-found and persistence errors propagate.
    """
    services = services or build_services()
    set_request_context()
    if not isinstance(request, ComplaintRequest):
        request = ComplaintRequest.model_validate(request)

    complaint = await services.complaints.generate(request, timeout_s=timeout_s)
    await services.store.append_complaint(complaint)
    if await services.store.find_document(complaint.document_id) is not None:
        await services.store.link_complaint_to_document(complaint.document_id, complaint.id)
    return complaint


async def check_status(services: Services | None = None) -> StatusReport:
    services = services or build_services()
    available = await services.orchestrator.is_available()
    return StatusReport(
        status="ready" if available else "offline",
        provider=services.backend.provider_name,
        model=services.settings.ollama_model,
        base_url=services.settings.ollama_base_url,
    )
