# ==============================================================================
# Cache Infrastructure
# ==============================================================================
"""
Cache implementations for the ports-and-adapters architecture.

Available implementations:
- MemoryCache: process-local dict with per-entry TTL (default)
- ValkeyCache: Valkey/Redis-based cache with JSON serialization
"""

from trafficlens.base import Cache
from trafficlens.infrastructure.cache.memory import MemoryCache
from trafficlens.infrastructure.cache.valkey import ValkeyCache
from trafficlens.utils.config import Settings, get_settings


def create_cache(settings: Settings | None = None) -> Cache:
    """
    Build the result cache selected by ANALYTICS_CACHE_BACKEND.

    Args:
        settings: Application settings. If None, uses get_settings().
    """
    settings = settings or get_settings()
    if settings.analytics.cache_backend == "valkey":
        return ValkeyCache(url=settings.valkey.url, key_prefix=settings.valkey.key_prefix)
    return MemoryCache(default_ttl_seconds=settings.analytics.cache_ttl_seconds)


__all__ = [
    "MemoryCache",
    "ValkeyCache",
    "create_cache",
]
