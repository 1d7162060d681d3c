# src/llm/adapters/ollama_adapter.py - v3
"""Ollama local model backend implementing BaseModelBackend.

Uses the ollama Python SDK (httpx underneath) against /api/generate.
The SDK client timeout is the per-attempt ceiling.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from jurisdraft.core.errors import BackendError, DecodeError, TransportError
from jurisdraft.llm.base_client import BaseModelBackend
from jurisdraft.llm.models import BackendReply, GenerateRequest

logger = logging.getLogger(__name__)


class OllamaBackend(BaseModelBackend):
    """Ollama local inference backend."""

    def __init__(
        self,
        model: str = "deepseek-r1:14b",
        base_url: str = "http://localhost:11434",
        timeout_s: float = 500.0,
        probe_timeout_s: float = 10.0,
        **kwargs: Any,
    ):
        self._model = model
        self._host = base_url
        self._timeout_s = timeout_s
        self._probe_timeout_s = probe_timeout_s
        self._client: Any = None
        self._probe_client: Any = None

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> Any:
        if self._client is None:
            import ollama

            self._client = ollama.AsyncClient(host=self._host, timeout=self._timeout_s)
        return self._client

    async def generate(self, request: GenerateRequest) -> BackendReply:
        import httpx
        import ollama
        from pydantic import ValidationError as SchemaError

        options: dict[str, Any] = {
            "temperature": request.temperature,
            "num_predict": request.max_tokens,
            "repeat_penalty": request.repeat_penalty,
        }
        t0 = time.monotonic()
        try:
            resp = await self._get_client().generate(
                model=request.model or self._model,
                prompt=request.prompt,
                format="json" if request.format == "json" else None,
                options=options,
                stream=False,
            )
        except ollama.ResponseError as e:
            raise BackendError(e.error, status_code=e.status_code) from e
        except (httpx.TransportError, ConnectionError, TimeoutError) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        except (json.JSONDecodeError, SchemaError) as e:
            raise DecodeError(f"Unreadable response body from Ollama: {e}") from e
        latency = int((time.monotonic() - t0) * 1000)

        return BackendReply(
            payload={"response": resp.get("response") or ""},
            model=request.model or self._model,
            provider="ollama",
            latency_ms=latency,
            input_tokens=resp.get("prompt_eval_count") or 0,
            output_tokens=resp.get("eval_count") or 0,
        )

    async def probe(self) -> bool:
        if self._probe_client is None:
            import ollama

            self._probe_client = ollama.AsyncClient(host=self._host, timeout=self._probe_timeout_s)
        try:
            await self._probe_client.list()
        except Exception as e:  # noqa: BLE001
            logger.warning("Ollama status probe failed at %s: %s", self._host, e)
            return False
        return True

    @property
    def provider_name(self) -> str:
        return "ollama"
