# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- fakeredis-backed ValkeyCache instances
- A MemoryCache driven by a manual clock
- A PageViewEvent factory anchored at a fixed base time
"""

from datetime import datetime, timedelta, timezone

import fakeredis
import pytest

from trafficlens.core.models import PageViewEvent
from trafficlens.infrastructure.cache import MemoryCache, ValkeyCache

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_redis():
    """A clean fakeredis instance for each test.

    Uses decode_responses=True to match the real ValkeyCache behavior.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def fake_cache(fake_redis):
    """A ValkeyCache with its internal client replaced by fakeredis.

    This avoids needing a real Valkey/Redis server for unit tests while
    exercising the full ValkeyCache API surface.
    """
    cache = ValkeyCache.__new__(ValkeyCache)
    cache._client = fake_redis
    cache._prefix = "test:"
    return cache


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def memory_cache(clock):
    """A MemoryCache whose expiry is controlled by the `clock` fixture."""
    return MemoryCache(default_ttl_seconds=30, clock=clock)


@pytest.fixture()
def base_time():
    return BASE_TIME


@pytest.fixture()
def make_event():
    """Factory for page views at BASE_TIME + `minutes`."""

    def _make(visitor_id: str = "v1", path: str = "/", minutes: float = 0, **kwargs):
        return PageViewEvent(
            visitor_id=visitor_id,
            path=path,
            timestamp=BASE_TIME + timedelta(minutes=minutes),
            **kwargs,
        )

    return _make
