# ==============================================================================
# Analytics Service
# ==============================================================================
"""
Orchestrates one dashboard stats request.

Flow: cache lookup -> fetch current window, visitor history and previous
window -> reconstruct sessions -> aggregate -> cache.

Every store call runs under the network profile's timeout and is retried
the profile's number of times when it times out.

Windows for a request ending at ``end`` with length ``w``:
- current:    [end - w, end]          (inclusive at both ends)
- historical: before end - w          (strictly)
- previous:   [end - 2w, end - w)     (used only for trends)

A visitor whose first view is exactly at the window start is therefore new,
never returning.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import TypeVar

from trafficlens.base import Cache, EventStore
from trafficlens.core.exit_pages import exit_pages
from trafficlens.core.funnel import funnel
from trafficlens.core.metrics import aggregate, compute_trends, recent_visitors
from trafficlens.core.models import AggregateResult, PageViewEvent
from trafficlens.core.sessions import SessionReconstructor
from trafficlens.core.traffic_sources import sources
from trafficlens.errors import EventStoreError
from trafficlens.utils.config import AnalyticsSettings, get_settings
from trafficlens.utils.network import (
    NetworkProfile,
    RequestConfig,
    get_refresh_interval,
    get_request_config,
    window_for,
)
from trafficlens.utils.retry import retry_timeouts

logger = logging.getLogger(__name__)

STATS_KEY_PREFIX = "stats"

T = TypeVar("T")


def stats_cache_key(site_id: str, range_str: str, profile: NetworkProfile) -> str:
    return f"{STATS_KEY_PREFIX}:{site_id}:{range_str}:{profile.value}"


class AnalyticsService:
    """
    Computes AggregateResult for a site, memoized per (site, range, profile).

    Never raises for event store failures: the caller gets an empty result
    with real_data=False, and that result is not cached so the next request
    tries the store again.
    """

    def __init__(
        self,
        store: EventStore,
        cache: Cache,
        settings: AnalyticsSettings | None = None,
    ):
        """
        Initialize the service.

        Args:
            store: Source of page view events
            cache: Result cache
            settings: Analytics settings. If None, uses get_settings().analytics.
        """
        self._store = store
        self._cache = cache
        self._settings = settings or get_settings().analytics
        self._reconstructor = SessionReconstructor(self._settings.session_timeout_minutes)

    async def get_stats(
        self,
        site_id: str,
        range_str: str | None = None,
        profile: NetworkProfile = NetworkProfile.FAST,
        now: datetime | None = None,
    ) -> AggregateResult:
        """
        Get dashboard stats for a site.

        Args:
            site_id: Site identifier
            range_str: Query window ("24h", "7d", "30d", "90d"). Defaults to
                the configured default range.
            profile: Client network profile; slow connections get shorter windows
            now: End of the window (defaults to the current UTC time)

        Returns:
            AggregateResult (empty with real_data=False if the store failed)

        Raises:
            ValueError: If range_str is not a valid range
        """
        range_str = range_str or self._settings.default_range
        key = stats_cache_key(site_id, range_str, profile)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return AggregateResult.model_validate(cached)

        end = now or datetime.now(timezone.utc)
        window = window_for(range_str, profile)
        start = end - window
        config = get_request_config(profile)

        try:
            events = await self._fetch(
                lambda: self._store.fetch_events(site_id, start, end), config, "page views"
            )
        except EventStoreError as e:
            logger.error("Failed to load page views for site %s: %s", site_id, e)
            return AggregateResult.empty(end)

        historical_ids: set[str] = set()
        previous_events: list[PageViewEvent] = []
        if events:
            historical_ids, previous_events = await self._fetch_context(
                site_id, start, window, config
            )
        result = self.compute(events, historical_ids, previous_events, now=end)

        self._cache.set(key, result.to_dict(), ttl_seconds=self._settings.cache_ttl_seconds)
        logger.info(
            "Computed stats for site %s (%s, %s): %d page views, %d sessions",
            site_id,
            range_str,
            profile.value,
            result.total_page_views,
            result.total_sessions,
        )
        return result

    async def _fetch(
        self, call: Callable[[], Awaitable[T]], config: RequestConfig, what: str
    ) -> T:
        """
        Await a store call under the profile's timeout, retrying timed-out attempts.

        Raises:
            EventStoreError: If every attempt timed out, or the store failed
        """

        async def attempt() -> T:
            return await asyncio.wait_for(call(), timeout=config.timeout_seconds)

        try:
            return await retry_timeouts(config.retries + 1, logger)(attempt)
        except TimeoutError as e:
            raise EventStoreError(
                f"Timed out loading {what} after {config.timeout_seconds:g}s"
            ) from e

    async def _fetch_context(
        self, site_id: str, start: datetime, window: timedelta, config: RequestConfig
    ) -> tuple[set[str], list[PageViewEvent]]:
        """Fetch visitor history and the previous window; failures degrade to empty."""
        previous_end = start - timedelta(microseconds=1)
        historical, previous = await asyncio.gather(
            self._fetch(
                lambda: self._store.fetch_visitor_ids_before(site_id, start),
                config,
                "visitor history",
            ),
            self._fetch(
                lambda: self._store.fetch_events(site_id, start - window, previous_end),
                config,
                "previous window",
            ),
            return_exceptions=True,
        )
        for outcome in (historical, previous):
            if isinstance(outcome, BaseException) and not isinstance(outcome, EventStoreError):
                raise outcome
        if isinstance(historical, EventStoreError):
            logger.warning("Visitor history unavailable for site %s: %s", site_id, historical)
            historical = set()
        if isinstance(previous, EventStoreError):
            logger.warning("Previous window unavailable for site %s: %s", site_id, previous)
            previous = []
        return historical, previous

    def compute(
        self,
        events: list[PageViewEvent],
        historical_visitor_ids: set[str] | None = None,
        previous_events: list[PageViewEvent] | None = None,
        now: datetime | None = None,
    ) -> AggregateResult:
        """
        Build an AggregateResult from already-fetched events.

        Args:
            events: Page views in the current window
            historical_visitor_ids: Visitors seen before the window
            previous_events: Page views in the previous window, for trends
            now: Timestamp recorded as last_updated

        Returns:
            AggregateResult; empty (real_data=False) when events is empty
        """
        if not events:
            return AggregateResult.empty(now)

        sessions = self._reconstructor.reconstruct(events)
        metrics = aggregate(events, historical_visitor_ids or (), sessions=sessions)

        previous_metrics = None
        if previous_events:
            previous_metrics = aggregate(
                previous_events, sessions=self._reconstructor.reconstruct(previous_events)
            )

        return AggregateResult(
            **metrics.model_dump(),
            exit_pages=exit_pages(events),
            traffic_sources=sources(events),
            conversion_funnel=funnel(events),
            recent_visitors=recent_visitors(events),
            trends=compute_trends(metrics, previous_metrics),
            real_data=True,
            last_updated=now or datetime.now(timezone.utc),
        )

    def invalidate(self, site_id: str) -> int:
        """
        Drop every cached result for a site.

        Returns:
            Count of cache entries removed
        """
        return self._cache.delete_pattern(f"{STATS_KEY_PREFIX}:{site_id}:*")

    @staticmethod
    def get_refresh_interval(profile: NetworkProfile) -> int:
        """Seconds a client on this profile should wait between refreshes."""
        return get_refresh_interval(profile)
