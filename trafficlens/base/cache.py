# ==============================================================================
# Cache Abstract Base Class
# ==============================================================================
"""
Abstract interface for key-value caching with TTL support.

Cache is transient storage for computed aggregates and classification
results. Nothing stored here is authoritative: every value can be
recomputed from the event store.

Implementations: in-memory (default), Valkey/Redis (shared).
"""

from abc import ABC, abstractmethod


class Cache(ABC):
    """
    Generic cache interface for key-value storage with TTL support.

    All values are stored as dicts (JSON-serializable). Implementations
    handle serialization/deserialization internally.
    """

    @abstractmethod
    def get(self, key: str) -> dict | None:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Cached value as dict, or None if not found or expired
        """
        ...

    @abstractmethod
    def set(self, key: str, value: dict, ttl_seconds: int | None = None) -> None:
        """
        Set a cached value with optional TTL.

        Args:
            key: Cache key
            value: Value to cache (must be JSON-serializable dict)
            ttl_seconds: Optional time-to-live in seconds
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Args:
            key: Cache key to delete

        Returns:
            True if key was deleted, False if not found
        """
        ...

    @abstractmethod
    def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a glob pattern.

        Args:
            pattern: Pattern to match (e.g., "stats:site-1:*")

        Returns:
            Count of keys deleted
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry owned by this cache."""
        ...
