# src/analysis/analyzer.py - v2
"""Legal text analysis entry point with fingerprint caching.

Flow per call:
  1. Blank text -> placeholder result, no model call.
  2. Cache lookup on compute_fingerprint(text, instructions).
  3. Miss -> analysis prompt -> QueryOrchestrator -> coerce to AnalysisResult.
  4. Deterministic date/agency extraction overrides the model's values.
  5. Successful results are cached; failures become a diagnostic placeholder.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from jurisdraft.analysis.extractors import extract_agency, extract_date
from jurisdraft.cache.base_cache_store import BaseCacheStore
from jurisdraft.cache.fingerprint import compute_fingerprint
from jurisdraft.config.settings import Settings
from jurisdraft.core.errors import DecodeError, InvalidResponse, QueryError
from jurisdraft.core.models import AnalysisResult, Violation
from jurisdraft.llm.models import QueryOptions
from jurisdraft.llm.query_orchestrator import QueryOrchestrator
from jurisdraft.prompts.builder import analysis_temperature, build_analysis_prompt

logger = logging.getLogger(__name__)

EMPTY_TEXT_SUMMARY = "Текст не содержит данных для анализа"
FAILURE_SUMMARY_PREFIX = "Ошибка анализа текста: "

# Model replies drift between key names across prompt versions.
_EXCERPT_KEYS = ("keyExcerpts", "key_excerpts", "keySentences", "keyParagraphs")


class LegalAnalyzer:
    """Analyze legal text into an AnalysisResult."""

    def __init__(
        self,
        orchestrator: QueryOrchestrator,
        cache: BaseCacheStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._cache = cache
        self._settings = settings or Settings()

    async def analyze(
        self,
        text: str,
        instructions: str = "",
        strict_mode: bool = False,
        timeout_s: float | None = None,
        deadline: float | None = None,
    ) -> AnalysisResult:
        """Analyze ``text``; always returns a result with a non-empty summary.

        ``timeout_s`` is relative to this call; ``deadline`` is an absolute
        ``time.monotonic()`` bound shared with the caller. The earlier one wins.
        """
        if not text or not text.strip():
            logger.info("Analysis skipped: empty text")
            return AnalysisResult(summary=EMPTY_TEXT_SUMMARY)

        text = text.strip()
        key = compute_fingerprint(text, instructions)
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                logger.info("Analysis cache hit: %s", key[:12])
                return cached

        if timeout_s is not None:
            own = time.monotonic() + timeout_s
            deadline = own if deadline is None else min(deadline, own)
        try:
            result = await self._analyze_uncached(text, instructions, strict_mode, deadline)
        except (QueryError, DecodeError, InvalidResponse) as e:
            logger.error("Text analysis failed: %s", e)
            return AnalysisResult(summary=f"{FAILURE_SUMMARY_PREFIX}{e}")

        if self._cache is not None:
            await self._cache.put(key, result)
        return result

    async def _analyze_uncached(
        self,
        text: str,
        instructions: str,
        strict_mode: bool,
        deadline: float | None,
    ) -> AnalysisResult:
        """Raises QueryError, DecodeError or InvalidResponse."""
        prompt = build_analysis_prompt(text, instructions)
        temperature = analysis_temperature(
            strict_mode,
            strict_value=self._settings.analysis_strict_temperature,
            normal_value=self._settings.llm_temperature,
        )
        parsed = await self._orchestrator.query(
            prompt,
            QueryOptions(temperature=temperature, response_format="json", task_type="analysis"),
            deadline=deadline,
        )
        result = coerce_analysis(parsed)
        return apply_deterministic_fields(result, text)


def coerce_analysis(parsed: dict[str, Any]) -> AnalysisResult:
    """Build an AnalysisResult from a normalized reply, defaulting optional fields.

    Raises:
        InvalidResponse: No usable summary in the reply.
    """
    summary = parsed.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise InvalidResponse(f"Model reply has no summary (keys: {sorted(parsed)})")

    return AnalysisResult(
        summary=summary.strip(),
        key_excerpts=_coerce_excerpts(parsed),
        violations=[_coerce_violation(v) for v in _as_list(parsed.get("violations"))
                    if isinstance(v, dict)],
        document_date=parsed.get("documentDate") or parsed.get("document_date"),
        sender_agency=_as_optional_str(parsed.get("senderAgency") or parsed.get("sender_agency")),
    )


def apply_deterministic_fields(result: AnalysisResult, text: str) -> AnalysisResult:
    """Regex date and known-agency matches win over the model's guesses."""
    updates: dict[str, Any] = {}
    found_date = extract_date(text)
    if found_date is not None:
        updates["document_date"] = found_date
    found_agency = extract_agency(text)
    if found_agency is not None:
        updates["sender_agency"] = found_agency
    if updates:
        logger.debug("Deterministic extraction applied: %s", sorted(updates))
        return result.model_copy(update=updates)
    return result


def _coerce_excerpts(parsed: dict[str, Any]) -> list[str]:
    for key in _EXCERPT_KEYS:
        if key in parsed:
            return [str(e).strip() for e in _as_list(parsed[key]) if str(e).strip()]
    return []


def _coerce_violation(raw: dict[str, Any]) -> Violation:
    return Violation(
        law=raw.get("law"),
        article=raw.get("article"),
        description=raw.get("description"),
        evidence_quote=raw.get("evidenceQuote") or raw.get("evidence_quote") or raw.get("quote"),
    )


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
