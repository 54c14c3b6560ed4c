# ==============================================================================
# Session Reconstructor - Pure Domain Logic
# ==============================================================================
"""
Pure session reconstruction with no external dependencies.

Turns a flat window of page views into visitor sessions:
- Group events by visitor
- Order each visitor's events by timestamp
- Split on inactivity gaps longer than the timeout

A gap of exactly the timeout keeps both events in the same session.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from trafficlens.core.models import PageViewEvent, Session

DEFAULT_TIMEOUT_MINUTES = 30


def group_by_visitor(events: Iterable[PageViewEvent]) -> dict[str, list[PageViewEvent]]:
    """
    Group events by visitor and sort each group chronologically.

    Visitors appear in first-seen order. The sort is stable, so events that
    share a timestamp keep their arrival order.

    Args:
        events: Page views in arrival order

    Returns:
        Dict mapping visitor_id to that visitor's events, oldest first
    """
    grouped: dict[str, list[PageViewEvent]] = {}
    for event in events:
        grouped.setdefault(event.visitor_id, []).append(event)
    for visitor_events in grouped.values():
        visitor_events.sort(key=lambda e: e.timestamp)
    return grouped


class SessionReconstructor:
    """
    Splits each visitor's event stream into sessions.

    Works on validated PageViewEvent models and returns Session models.
    Stateless apart from the timeout, so one instance can be shared.
    """

    def __init__(self, timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES):
        """
        Initialize session reconstructor.

        Args:
            timeout_minutes: Session inactivity timeout in minutes.
                            A new session starts if the gap between events
                            exceeds this timeout.
        """
        self.timeout = timedelta(minutes=timeout_minutes)

    def is_session_expired(self, last_activity: datetime | None, event_time: datetime) -> bool:
        """
        Check if the current session has expired based on inactivity timeout.

        Args:
            last_activity: Timestamp of the previous event, or None if no session exists
            event_time: Timestamp of the new event

        Returns:
            True if a new session should start
        """
        if last_activity is None:
            return True
        return event_time - last_activity > self.timeout

    def split_visitor(self, visitor_id: str, events: list[PageViewEvent]) -> list[Session]:
        """
        Split one visitor's chronologically sorted events into sessions.

        Args:
            visitor_id: Visitor identifier
            events: That visitor's events, oldest first

        Returns:
            Sessions in chronological order
        """
        sessions: list[Session] = []
        current: list[PageViewEvent] = []
        last_activity: datetime | None = None

        for event in events:
            if self.is_session_expired(last_activity, event.timestamp) and current:
                sessions.append(self._build(visitor_id, current))
                current = []
            current.append(event)
            last_activity = event.timestamp

        if current:
            sessions.append(self._build(visitor_id, current))
        return sessions

    def reconstruct(self, events: Iterable[PageViewEvent]) -> list[Session]:
        """
        Reconstruct sessions for every visitor in the window.

        Every input event lands in exactly one session. An empty input
        yields an empty list.

        Args:
            events: Page views in any order

        Returns:
            Sessions ordered by visitor first-seen order, then start time
        """
        sessions: list[Session] = []
        for visitor_id, visitor_events in group_by_visitor(events).items():
            sessions.extend(self.split_visitor(visitor_id, visitor_events))
        return sessions

    @staticmethod
    def _build(visitor_id: str, events: list[PageViewEvent]) -> Session:
        return Session(
            visitor_id=visitor_id,
            session_start=events[0].timestamp,
            session_end=events[-1].timestamp,
            events=list(events),
        )


def reconstruct(
    events: Iterable[PageViewEvent], timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES
) -> list[Session]:
    """Reconstruct sessions with a one-off SessionReconstructor."""
    return SessionReconstructor(timeout_minutes).reconstruct(events)
