# ==============================================================================
# Valkey Cache Implementation
# ==============================================================================
"""
Valkey/Redis implementation of the Cache interface.

Used when several processes should share computed aggregates. Every key is
namespaced with the configured prefix so the cache can live in a shared
database, and expiry is delegated to the server (SETEX).

Uses JSON serialization for storing dict values.
"""

import json
import logging

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

from trafficlens.base import Cache
from trafficlens.utils.config import get_settings
from trafficlens.utils.retry import VALKEY_RETRIES

logger = logging.getLogger(__name__)


class ValkeyCache(Cache):
    """
    Valkey/Redis implementation of the Cache interface.

    Configured with:
    - Short socket timeouts so a dead cache degrades to recomputation quickly
    - Automatic retries with exponential backoff for transient failures
    - Health check interval to keep connections alive

    All values are stored as JSON strings and deserialized on retrieval.
    """

    def __init__(
        self,
        url: str | None = None,
        key_prefix: str | None = None,
        socket_timeout: int = 5,
        retries: int | None = None,
        health_check_interval: int = 30,
    ):
        """
        Initialize Valkey cache.

        Args:
            url: Valkey/Redis connection URL. If None, uses settings.
            key_prefix: Namespace prepended to every key. If None, uses settings.
            socket_timeout: Socket timeout in seconds (default: 5)
            retries: Number of retries for transient failures (default: VALKEY_RETRIES)
            health_check_interval: Health check interval in seconds (default: 30)
        """
        settings = get_settings()
        if url is None:
            url = settings.valkey.url
        if key_prefix is None:
            key_prefix = settings.valkey.key_prefix

        retry_count = retries if retries is not None else VALKEY_RETRIES
        retry_strategy = Retry(ExponentialBackoff(cap=8, base=1), retries=retry_count)

        self._client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry=retry_strategy,
            retry_on_error=[RedisTimeoutError, RedisConnectionError],
            health_check_interval=health_check_interval,
        )
        self._prefix = key_prefix

    @property
    def client(self) -> redis.Redis:
        """Get the underlying Redis client for advanced operations."""
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> dict | None:
        value = self._client.get(self._key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Failed to decode JSON for key %s", key)
            return None

    def set(self, key: str, value: dict, ttl_seconds: int | None = None) -> None:
        json_value = json.dumps(value)
        if ttl_seconds is not None:
            self._client.setex(self._key(key), ttl_seconds, json_value)
        else:
            self._client.set(self._key(key), json_value)

    def delete(self, key: str) -> bool:
        return self._client.delete(self._key(key)) > 0

    def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern within this cache's namespace.

        Args:
            pattern: Glob pattern, without the key prefix

        Returns:
            Count of keys deleted
        """
        keys = list(self._client.scan_iter(self._key(pattern)))
        if keys:
            return self._client.delete(*keys)
        return 0

    def clear(self) -> None:
        self.delete_pattern("*")

    def ping(self) -> bool:
        """
        Check if the cache is reachable.

        Returns:
            True if ping succeeds, False otherwise
        """
        try:
            return self._client.ping()
        except redis.RedisError:
            return False

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
