# ==============================================================================
# In-Memory Cache Implementation
# ==============================================================================
"""
Process-local implementation of the Cache interface.

Entries carry their own expiry time and are dropped lazily on read or by an
explicit cleanup() sweep. Values are deep-copied on the way in and out so
callers can never mutate a cached result in place.
"""

import copy
import fnmatch
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from trafficlens.base import Cache

logger = logging.getLogger(__name__)

# Used when set() is called without a TTL
DEFAULT_TTL_SECONDS = 30


@dataclass
class _Entry:
    value: dict
    expires_at: float


class MemoryCache(Cache):
    """
    Dict-backed cache with per-entry TTL.

    Thread-safe. Concurrent misses for the same key may both compute and
    store; the last write wins.
    """

    def __init__(
        self,
        default_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            default_ttl_seconds: TTL applied when set() gets none
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._default_ttl = default_ttl_seconds
        self._clock = clock

    def get(self, key: str) -> dict | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: dict, ttl_seconds: int | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries[key] = _Entry(copy.deepcopy(value), self._clock() + ttl)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_pattern(self, pattern: str) -> int:
        with self._lock:
            keys = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
            for key in keys:
                del self._entries[key]
        if keys:
            logger.debug("Invalidated %d cache entries matching %s", len(keys), pattern)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Count of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
