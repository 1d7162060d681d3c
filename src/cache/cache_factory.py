# src/cache/cache_factory.py - v3
"""Factory for analysis cache instantiation."""

from __future__ import annotations

from jurisdraft.cache.base_cache_store import BaseCacheStore
from jurisdraft.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore | None:
    """Instantiate the configured cache backend.

    Returns:
        Configured BaseCacheStore, or None when CACHE_ENABLED is false.
    """
    settings = settings or Settings()
    if not settings.cache_enabled:
        return None

    if settings.cache_backend == "memory":
        from jurisdraft.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(
            max_entries=settings.cache_max_entries, ttl_s=settings.cache_ttl_s,
        )

    if settings.cache_backend == "json":
        from jurisdraft.cache.json_store import JsonCacheStore
        return JsonCacheStore(
            cache_root=settings.cache_root,
            max_entries=settings.cache_max_entries,
            ttl_s=settings.cache_ttl_s,
        )

    raise ValueError(f"Unsupported cache backend: {settings.cache_backend!r}")
