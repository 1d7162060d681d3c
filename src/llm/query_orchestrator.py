# src/llm/query_orchestrator.py - v1
"""Owns the round-trip to the model backend.

Request construction (defaults merged with caller overrides), per-attempt
timeout, bounded retry, error classification, and reply normalization.
Does not cache; caching sits in front of it in LegalAnalyzer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from jurisdraft.config.settings import Settings
from jurisdraft.core.errors import DeadlineExceeded, TransportError
from jurisdraft.llm.base_client import BaseModelBackend
from jurisdraft.llm.models import BackendReply, GenerateRequest, QueryOptions
from jurisdraft.llm.normalizer import normalize
from jurisdraft.llm.retry import RetryPolicy, run_with_retry
from jurisdraft.logging.context import set_task_context

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Query the model backend and return a normalized dict."""

    def __init__(
        self,
        backend: BaseModelBackend,
        settings: Settings | None = None,
        model: str | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._backend = backend
        self._settings = settings or Settings()
        self._model = model or self._settings.ollama_model
        self._policy = retry_policy or RetryPolicy(
            max_retries=self._settings.llm_max_retries,
            base_delay_s=self._settings.llm_retry_base_delay_s,
        )
        self._timeout_s = self._settings.llm_timeout_s

    @property
    def backend(self) -> BaseModelBackend:
        return self._backend

    def build_request(self, prompt: str, options: QueryOptions | None = None) -> GenerateRequest:
        """Merge configured defaults with caller overrides; the caller wins."""
        s = self._settings
        body: dict[str, Any] = {
            "model": self._model,
            "prompt": prompt,
            "temperature": s.llm_temperature,
            "max_tokens": s.llm_max_tokens,
            "repeat_penalty": s.llm_repeat_penalty,
            "format": s.llm_response_format,
        }
        if options is not None:
            overrides = options.model_dump(exclude_none=True, exclude={"task_type"})
            if "response_format" in overrides:
                overrides["format"] = overrides.pop("response_format")
            body.update(overrides)
        return GenerateRequest(**body)

    async def query(
        self,
        prompt: str,
        options: QueryOptions | None = None,
        deadline: float | None = None,
    ) -> dict[str, Any]:
        """Run the prompt and return the normalized reply.

        Args:
            prompt: Complete prompt text.
            options: Per-call overrides (temperature, max_tokens, format, task_type).
            deadline: Absolute ``time.monotonic()`` bound for the whole call.

        Raises:
            QueryError: Transport/backend failures after the retry budget.
            DeadlineExceeded: Deadline reached; no further attempts are issued.
            DecodeError: Reply body could not be interpreted (not retried).
        """
        options = options or QueryOptions()
        request = self.build_request(prompt, options)
        set_task_context(options.task_type)
        logger.debug(
            "Model query: task=%s model=%s temperature=%.2f max_tokens=%d prompt_chars=%d",
            options.task_type, request.model, request.temperature,
            request.max_tokens, len(prompt),
        )

        async def attempt(remaining: float | None) -> BackendReply:
            timeout = self._timeout_s if remaining is None else min(self._timeout_s, remaining)
            try:
                return await asyncio.wait_for(self._backend.generate(request), timeout=timeout)
            except asyncio.TimeoutError as e:
                # Timeout clipped to the deadline means the deadline fired.
                if remaining is not None and remaining <= self._timeout_s:
                    raise DeadlineExceeded(f"{options.task_type} query: deadline expired", cause=e) from e
                raise TransportError(f"No reply within {timeout:.0f}s") from e

        reply = await run_with_retry(
            attempt, self._policy, deadline=deadline, label=f"{options.task_type} query",
        )
        logger.info(
            "Model reply: task=%s latency_ms=%d tokens_in=%d tokens_out=%d",
            options.task_type, reply.latency_ms, reply.input_tokens, reply.output_tokens,
        )
        return normalize(_unwrap(reply.payload))

    async def is_available(self) -> bool:
        """Advisory probe; callers must not gate queries on it."""
        return await self._backend.probe()


def _unwrap(payload: Any) -> Any:
    """Take the generated text out of a ``{"response": text}`` envelope."""
    if isinstance(payload, dict) and isinstance(payload.get("response"), str):
        return payload["response"]
    return payload
