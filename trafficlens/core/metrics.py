# ==============================================================================
# Metrics Aggregator
# ==============================================================================
"""
Visitor and engagement metrics computed from reconstructed sessions.

Provides:
- Core metrics (visitors, new/returning split, bounce rate, session duration,
  pages per visit)
- Trends against a previous window
- Recent visitor listing
"""

from collections.abc import Iterable, Sequence

from trafficlens.core.models import CoreMetrics, PageViewEvent, RecentVisitor, Session, Trends
from trafficlens.core.ratios import percent, percent_change, safe_ratio
from trafficlens.core.sessions import DEFAULT_TIMEOUT_MINUTES, SessionReconstructor

RECENT_VISITOR_LIMIT = 10


def aggregate(
    events: Sequence[PageViewEvent],
    historical_visitor_ids: Iterable[str] = (),
    sessions: list[Session] | None = None,
    timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES,
) -> CoreMetrics:
    """
    Compute core metrics for a window of page views.

    Args:
        events: Page views in the current window
        historical_visitor_ids: Visitor ids seen before the window start.
            Visitors present in both are counted as returning.
        sessions: Sessions already reconstructed from ``events``. Rebuilt
            when omitted.
        timeout_minutes: Inactivity timeout used when rebuilding sessions

    Returns:
        CoreMetrics with every rate guarded to 0 for an empty window
    """
    if sessions is None:
        sessions = SessionReconstructor(timeout_minutes).reconstruct(events)

    visitors = {e.visitor_id for e in events}
    historical = set(historical_visitor_ids)
    returning = len(visitors & historical)

    total_sessions = len(sessions)
    bounces = sum(1 for s in sessions if s.is_bounce)

    # One-event sessions have no measurable duration and stay out of the average
    multi_event = [s for s in sessions if not s.is_bounce]
    total_duration = sum(s.duration_seconds for s in multi_event)

    return CoreMetrics(
        total_visitors=len(visitors),
        new_visitors=len(visitors) - returning,
        returning_visitors=returning,
        bounce_rate=percent(bounces, total_sessions),
        avg_session_duration=round(safe_ratio(total_duration, len(multi_event)), 1),
        pages_per_visit=round(safe_ratio(len(events), total_sessions), 1),
        total_page_views=len(events),
        total_sessions=total_sessions,
    )


def compute_trends(current: CoreMetrics, previous: CoreMetrics | None) -> Trends:
    """
    Percent change of headline metrics against the previous window.

    Returns all zeros when there is no previous window to compare with.
    """
    if previous is None or previous.total_page_views == 0:
        return Trends()
    return Trends(
        bounce_rate=percent_change(current.bounce_rate, previous.bounce_rate),
        avg_session_duration=percent_change(
            current.avg_session_duration, previous.avg_session_duration
        ),
        pages_per_visit=percent_change(current.pages_per_visit, previous.pages_per_visit),
        total_visitors=percent_change(current.total_visitors, previous.total_visitors),
    )


def recent_visitors(
    events: Iterable[PageViewEvent], limit: int = RECENT_VISITOR_LIMIT
) -> list[RecentVisitor]:
    """
    Latest page view per visitor, most recent visitors first.

    Args:
        events: Page views in the current window
        limit: Maximum number of visitors returned

    Returns:
        Up to ``limit`` RecentVisitor entries
    """
    latest: dict[str, PageViewEvent] = {}
    for event in events:
        existing = latest.get(event.visitor_id)
        if existing is None or event.timestamp > existing.timestamp:
            latest[event.visitor_id] = event

    ordered = sorted(latest.values(), key=lambda e: e.timestamp, reverse=True)[:limit]
    return [
        RecentVisitor(
            visitor_id=e.visitor_id,
            last_seen=e.timestamp,
            current_page=e.path,
            referrer=e.referrer,
            source=e.source_key,
            screen_resolution=(
                f"{e.screen_width}x{e.screen_height}"
                if e.screen_width and e.screen_height
                else None
            ),
            language=e.language,
            timezone=e.timezone,
        )
        for e in ordered
    ]
