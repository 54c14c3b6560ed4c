# ==============================================================================
# Tests for AnalyticsService
# ==============================================================================
"""
Tests for the stats orchestration: windows, caching and store failures.

Uses InMemoryEventStore for realistic flows and AsyncMock stores to inject
failures and inspect the windows requested.
"""

import asyncio
import logging
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from trafficlens.base import EventStore
from trafficlens.errors import EventStoreError
from trafficlens.infrastructure.event_store import InMemoryEventStore
from trafficlens.services.analytics import AnalyticsService, stats_cache_key
from trafficlens.utils.config import AnalyticsSettings
from trafficlens.utils.network import NetworkProfile, RequestConfig


@pytest.fixture()
def settings():
    return AnalyticsSettings(session_timeout_minutes=30, cache_ttl_seconds=30, default_range="24h")


@pytest.fixture()
def now(base_time):
    return base_time + timedelta(hours=1)


def _service(store, cache, settings):
    return AnalyticsService(store, cache, settings)


def _mock_store(events=(), visitor_ids=()):
    store = AsyncMock(spec=EventStore)
    store.fetch_events.return_value = list(events)
    store.fetch_visitor_ids_before.return_value = set(visitor_ids)
    return store


# ==============================================================================
# Dashboard scenarios
# ==============================================================================


class TestScenarios:
    """End-to-end stats for small, hand-checked windows."""

    def test_empty_window(self, memory_cache, settings, now):
        service = _service(InMemoryEventStore(), memory_cache, settings)

        result = asyncio.run(service.get_stats("site", now=now))

        assert result.real_data is False
        assert result.total_visitors == 0
        assert result.exit_pages == []
        assert result.traffic_sources == []
        assert result.conversion_funnel == []

    def test_single_page_view(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore([make_event()])

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.real_data is True
        assert result.total_visitors == 1
        assert result.total_sessions == 1
        assert result.bounce_rate == 100.0
        assert result.avg_session_duration == 0.0
        assert result.total_page_views == 1

    def test_checkout_journey(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore(
            [
                make_event(path="/", minutes=0),
                make_event(path="/cart", minutes=5),
                make_event(path="/checkout", minutes=10),
            ]
        )

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.total_sessions == 1
        assert result.bounce_rate == 0.0
        assert result.pages_per_visit == 3.0
        assert [s.path for s in result.conversion_funnel] == ["/", "/cart", "/checkout"]
        assert all(s.drop_off_count == 0 for s in result.conversion_funnel)

    def test_inactivity_gap_splits_sessions(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore([make_event(minutes=0), make_event(path="/a", minutes=40)])

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.total_visitors == 1
        assert result.total_sessions == 2

    def test_result_serializes_camel_case(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore([make_event()])

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))
        data = result.to_dict()

        assert data["realData"] is True
        assert "totalVisitors" in data
        assert "conversionFunnel" in data


# ==============================================================================
# Windows
# ==============================================================================


class TestWindows:
    """Tests for window boundaries and profile caps."""

    def test_visitor_first_seen_at_window_start_is_new(
        self, memory_cache, settings, now, make_event
    ):
        start_minutes = -23 * 60
        store = InMemoryEventStore(
            [
                make_event("edge", minutes=start_minutes),
                make_event("old", minutes=start_minutes - 1),
                make_event("old", minutes=0),
            ]
        )

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.total_visitors == 2
        assert result.new_visitors == 1
        assert result.returning_visitors == 1

    def test_trends_use_previous_window(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore(
            [
                make_event("p1", minutes=-30 * 60),
                make_event("v1", minutes=0),
                make_event("v2", minutes=0),
            ]
        )

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.trends.total_visitors == 100.0

    def test_no_previous_window_means_flat_trends(self, memory_cache, settings, now, make_event):
        store = InMemoryEventStore([make_event()])

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.trends.total_visitors == 0.0

    def test_slow_profile_caps_window(self, memory_cache, settings, now):
        store = _mock_store()
        service = _service(store, memory_cache, settings)

        asyncio.run(service.get_stats("site", "30d", NetworkProfile.SLOW, now=now))

        site_id, start, end = store.fetch_events.await_args.args
        assert site_id == "site"
        assert end == now
        assert end - start == timedelta(days=14)

    def test_fast_profile_keeps_requested_window(self, memory_cache, settings, now):
        store = _mock_store()

        asyncio.run(_service(store, memory_cache, settings).get_stats("site", "90d", now=now))

        _, start, end = store.fetch_events.await_args.args
        assert end - start == timedelta(days=90)

    def test_invalid_range_raises(self, memory_cache, settings, now):
        service = _service(_mock_store(), memory_cache, settings)

        with pytest.raises(ValueError):
            asyncio.run(service.get_stats("site", "soon", now=now))

    def test_context_skipped_for_empty_window(self, memory_cache, settings, now):
        store = _mock_store()

        asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        store.fetch_visitor_ids_before.assert_not_awaited()
        assert store.fetch_events.await_count == 1


# ==============================================================================
# Failures
# ==============================================================================


class TestStoreFailures:
    """Event store failures degrade instead of raising."""

    def test_current_window_failure_returns_empty_uncached(self, memory_cache, settings, now):
        store = _mock_store()
        store.fetch_events.side_effect = EventStoreError("connection refused")

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.real_data is False
        assert result.total_page_views == 0
        assert len(memory_cache) == 0

    def test_history_failure_degrades(self, memory_cache, settings, now, make_event, caplog):
        store = _mock_store()
        store.fetch_events.side_effect = [[make_event("v1")], []]
        store.fetch_visitor_ids_before.side_effect = EventStoreError("timeout")

        with caplog.at_level(logging.WARNING):
            result = asyncio.run(
                _service(store, memory_cache, settings).get_stats("site", now=now)
            )

        assert result.real_data is True
        assert result.returning_visitors == 0
        assert result.new_visitors == 1
        assert "Visitor history unavailable" in caplog.text

    def test_unexpected_errors_propagate(self, memory_cache, settings, now, make_event):
        store = _mock_store(events=[make_event()])
        store.fetch_visitor_ids_before.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))


class TestProfileTimeouts:
    """Store calls run under the profile's timeout and retry count."""

    @pytest.fixture(autouse=True)
    def quick_profile(self, monkeypatch):
        config = RequestConfig(
            timeout_seconds=0.05, retries=1, max_window_days=90, refresh_interval_seconds=60
        )
        monkeypatch.setattr(
            "trafficlens.services.analytics.get_request_config", lambda profile: config
        )

    def test_hung_store_returns_empty_after_retries(self, memory_cache, settings, now, caplog):
        async def hang(*args):
            await asyncio.sleep(5)

        store = _mock_store()
        store.fetch_events.side_effect = hang

        with caplog.at_level(logging.WARNING):
            result = asyncio.run(
                _service(store, memory_cache, settings).get_stats("site", now=now)
            )

        assert result.real_data is False
        assert store.fetch_events.await_count == 2
        assert "Retry attempt 1/2" in caplog.text
        assert "Timed out loading page views" in caplog.text
        assert len(memory_cache) == 0

    def test_timed_out_attempt_is_retried(self, memory_cache, settings, now, make_event):
        calls = []

        async def slow_then_fast(*args):
            calls.append(args)
            if len(calls) == 1:
                await asyncio.sleep(5)
            return [make_event()]

        store = _mock_store()
        store.fetch_events.side_effect = slow_then_fast

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.real_data is True
        assert result.total_page_views == 1

    def test_hung_history_degrades(self, memory_cache, settings, now, make_event):
        async def hang(*args):
            await asyncio.sleep(5)

        store = _mock_store(events=[make_event()])
        store.fetch_visitor_ids_before.side_effect = hang

        result = asyncio.run(_service(store, memory_cache, settings).get_stats("site", now=now))

        assert result.real_data is True
        assert result.returning_visitors == 0
        assert store.fetch_visitor_ids_before.await_count == 2


# ==============================================================================
# Caching
# ==============================================================================


class TestCaching:
    """Results are memoized per (site, range, profile)."""

    def test_second_call_hits_cache(self, memory_cache, settings, now, make_event):
        store = _mock_store(events=[make_event()])
        service = _service(store, memory_cache, settings)

        first = asyncio.run(service.get_stats("site", now=now))
        second = asyncio.run(service.get_stats("site", now=now))

        # current + previous window on the first call only
        assert store.fetch_events.await_count == 2
        assert second.to_dict() == first.to_dict()
        assert memory_cache.get(stats_cache_key("site", "24h", NetworkProfile.FAST)) is not None

    def test_entry_expires(self, memory_cache, settings, now, clock, make_event):
        store = _mock_store(events=[make_event()])
        service = _service(store, memory_cache, settings)

        asyncio.run(service.get_stats("site", now=now))
        clock.advance(31)
        asyncio.run(service.get_stats("site", now=now))

        assert store.fetch_events.await_count == 4

    def test_profiles_cached_separately(self, memory_cache, settings, now, make_event):
        store = _mock_store(events=[make_event()])
        service = _service(store, memory_cache, settings)

        asyncio.run(service.get_stats("site", profile=NetworkProfile.FAST, now=now))
        asyncio.run(service.get_stats("site", profile=NetworkProfile.SLOW, now=now))

        assert store.fetch_events.await_count == 4

    def test_invalidate(self, memory_cache, settings, now, make_event):
        service = _service(_mock_store(events=[make_event()]), memory_cache, settings)
        asyncio.run(service.get_stats("site", "24h", now=now))
        asyncio.run(service.get_stats("site", "7d", now=now))
        memory_cache.set("stats:other:24h:fast", {})

        assert service.invalidate("site") == 2
        assert len(memory_cache) == 1


class TestCompute:
    """compute() is a pure function of its inputs."""

    def test_repeated_calls_are_identical(self, memory_cache, settings, now, make_event):
        events = [
            make_event("v1", "/", 0, time_on_page=12.5),
            make_event("v1", "/cart", 4, referrer="https://google.com"),
            make_event("v1", "/checkout", 45),
            make_event("v2", "/", 1, utm_source="facebook"),
            make_event("v2", "/cart", 6),
            make_event("v3", "/blog/post", 2),
        ]
        previous = [make_event("v2", "/", -30 * 60), make_event("v4", "/about", -29 * 60)]
        history = {"v2", "v4"}
        service = _service(_mock_store(), memory_cache, settings)

        first = service.compute(events, history, previous, now=now)
        second = service.compute(events, history, previous, now=now)

        assert first.to_dict() == second.to_dict()
        assert first.real_data is True
        assert len(memory_cache) == 0


class TestHelpers:
    def test_cache_key_format(self):
        assert stats_cache_key("s1", "7d", NetworkProfile.MEDIUM) == "stats:s1:7d:medium"

    def test_refresh_interval(self):
        assert AnalyticsService.get_refresh_interval(NetworkProfile.SLOW) == 300
