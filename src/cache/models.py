# src/cache/models.py - v2
"""Cache domain model: CacheEntry."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from jurisdraft.core.models import AnalysisResult


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    """A previously computed analysis, keyed by its input fingerprint."""

    key: str
    result: AnalysisResult
    created_at: datetime = Field(default_factory=_now)

    def is_expired(self, ttl_s: float, now: datetime | None = None) -> bool:
        """TTL of 0 disables expiry."""
        if ttl_s <= 0:
            return False
        now = now or _now()
        return (now - self.created_at).total_seconds() > ttl_s
