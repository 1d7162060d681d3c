# src/llm/models.py - v3
"""Model-backend types: QueryOptions, GenerateRequest, BackendReply."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

ResponseFormat = Literal["json", "text"]


class QueryOptions(BaseModel):
    """Per-call overrides. ``None`` fields fall back to the configured defaults."""

    temperature: float | None = None
    max_tokens: int | None = None
    response_format: ResponseFormat | None = None
    repeat_penalty: float | None = None
    task_type: str = "generic"


class GenerateRequest(BaseModel):
    """Fully resolved request sent to the generate endpoint."""

    model: str
    prompt: str
    temperature: float
    max_tokens: int
    repeat_penalty: float
    format: ResponseFormat


class BackendReply(BaseModel):
    """Raw reply from the backend, before normalization.

    ``payload`` is either ``{"response": text}`` or a structured object.
    """

    payload: Any
    model: str
    provider: str
    latency_ms: int
    input_tokens: int = 0
    output_tokens: int = 0
