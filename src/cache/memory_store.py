# src/cache/memory_store.py - v1
"""Process-local analysis cache (default CACHE_BACKEND=memory).

LRU-bounded with an optional TTL. All map access happens under one
asyncio.Lock so concurrent requests cannot interleave a read-modify-write.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable

from jurisdraft.cache.base_cache_store import BaseCacheStore
from jurisdraft.cache.models import CacheEntry
from jurisdraft.core.models import AnalysisResult

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryCacheStore(BaseCacheStore):
    """In-memory LRU + TTL cache."""

    def __init__(
        self,
        max_entries: int = 512,
        ttl_s: float = 86_400.0,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_entries = max_entries
        self._ttl_s = ttl_s
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> AnalysisResult | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._ttl_s, now=self._clock()):
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key[:12])
                return None
            self._entries.move_to_end(key)
            return entry.result.model_copy(deep=True)

    async def put(self, key: str, result: AnalysisResult) -> None:
        if self._max_entries == 0:
            return
        async with self._lock:
            self._entries[key] = CacheEntry(
                key=key, result=result.model_copy(deep=True), created_at=self._clock(),
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted (LRU): %s", evicted[:12])

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        async with self._lock:
            return len(self._entries)
