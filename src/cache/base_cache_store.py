# src/cache/base_cache_store.py - v2
"""Abstract analysis cache interface.

Implementations must be safe for concurrent use from multiple asyncio tasks
and must enforce their own eviction/expiry policy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from jurisdraft.core.models import AnalysisResult


class BaseCacheStore(ABC):
    """Fingerprint -> AnalysisResult store."""

    @abstractmethod
    async def get(self, key: str) -> AnalysisResult | None:
        """Return the cached result, or None on miss or expiry."""

    @abstractmethod
    async def put(self, key: str, result: AnalysisResult) -> None:
        """Store a result, evicting as needed."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an entry if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop all entries."""

    @abstractmethod
    async def size(self) -> int:
        """Number of live entries."""
