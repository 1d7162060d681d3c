# src/llm/normalizer.py - v1
"""Turn a raw model reply into structured data.

Outcomes are explicit variants:
  Structured - a dict (passed through, or decoded from a brace span in text)
  FreeText   - text with no brace span at all
Anything else, or a brace span that does not decode, is a DecodeError.
The normalizer never fabricates fields; callers apply defaults.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

from jurisdraft.core.errors import DecodeError

# Reasoning models (deepseek-r1) prepend their chain of thought.
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_FENCE_LINE = re.compile(r"^\s*```[\w-]*\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Structured:
    data: dict[str, Any]


@dataclass(frozen=True)
class FreeText:
    text: str


ParsedReply = Union[Structured, FreeText]


def _clean_text(text: str) -> str:
    text = _THINK_BLOCK.sub("", text)
    text = _FENCE_LINE.sub("", text)
    return text.strip()


def parse_reply(raw: Any) -> ParsedReply:
    """Classify and decode a raw reply.

    Raises:
        DecodeError: Brace span present but not valid JSON object, or the
            payload type is not interpretable.
    """
    if isinstance(raw, dict):
        return Structured(raw)
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Reply is not valid UTF-8: {e}") from e
    if not isinstance(raw, str):
        raise DecodeError(f"Unsupported reply type: {type(raw).__name__}")

    text = _clean_text(raw)
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return FreeText(text)

    span = text[start : end + 1]
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON in model reply: {e.msg} at pos {e.pos}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"Expected JSON object, got {type(data).__name__}")
    return Structured(data)


def normalize(raw: Any) -> dict[str, Any]:
    """Structured dict for any interpretable reply; free text becomes ``{"response": text}``."""
    parsed = parse_reply(raw)
    if isinstance(parsed, Structured):
        return parsed.data
    return {"response": parsed.text}
