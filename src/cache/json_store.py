# src/cache/json_store.py - v2
"""JSON file-based analysis cache (CACHE_BACKEND=json).

One JSON file per fingerprint under CACHE_ROOT, so cached analyses survive a
process restart. Expired or unreadable files count as misses.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from jurisdraft.cache.base_cache_store import BaseCacheStore
from jurisdraft.cache.models import CacheEntry
from jurisdraft.core.models import AnalysisResult

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str, max_entries: int = 512, ttl_s: float = 86_400.0) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._max_entries = max_entries
        self._ttl_s = ttl_s
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> AnalysisResult | None:
        async with self._lock:
            entry = self._read(self._entry_path(key))
            if entry is None:
                return None
            if entry.is_expired(self._ttl_s):
                self._entry_path(key).unlink(missing_ok=True)
                return None
            return entry.result

    async def put(self, key: str, result: AnalysisResult) -> None:
        if self._max_entries == 0:
            return
        async with self._lock:
            entry = CacheEntry(key=key, result=result)
            self._entry_path(key).write_text(entry.model_dump_json(indent=2), encoding="utf-8")
            self._evict_oldest()

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entry_path(key).unlink(missing_ok=True)

    async def clear(self) -> None:
        async with self._lock:
            for path in self._root.glob("*.json"):
                path.unlink(missing_ok=True)

    async def size(self) -> int:
        async with self._lock:
            return sum(1 for _ in self._root.glob("*.json"))

    def _evict_oldest(self) -> None:
        paths = sorted(self._root.glob("*.json"), key=lambda p: p.stat().st_mtime)
        for path in paths[: max(0, len(paths) - self._max_entries)]:
            path.unlink(missing_ok=True)

    @staticmethod
    def _read(path: Path) -> CacheEntry | None:
        if not path.exists():
            return None
        try:
            return CacheEntry(**json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to read cache entry %s: %s", path.name, e)
            return None

    def _entry_path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"
