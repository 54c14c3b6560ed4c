# ==============================================================================
# Event Store Abstract Base Class
# ==============================================================================
"""
Read-side interface to wherever page views are persisted.

The analytics engine never writes events; it only needs the rows for a
site and a time window, plus the set of visitors seen before a window
started (to tell new from returning visitors).
"""

from abc import ABC, abstractmethod
from datetime import datetime

from trafficlens.core.models import PageViewEvent


class EventStore(ABC):
    """
    Async source of page view events.

    Adapters must wrap every transport or query failure in EventStoreError.
    Callers degrade to an empty result only for EventStoreError; any other
    exception is treated as a bug and propagates.
    """

    @abstractmethod
    async def fetch_events(
        self, site_id: str, start: datetime, end: datetime
    ) -> list[PageViewEvent]:
        """
        Fetch page views for a site within a window.

        Args:
            site_id: Site identifier
            start: Window start (inclusive)
            end: Window end (inclusive)

        Returns:
            Page views ordered by timestamp

        Raises:
            EventStoreError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def fetch_visitor_ids_before(self, site_id: str, before: datetime) -> set[str]:
        """
        Fetch ids of visitors with at least one page view strictly before a time.

        Args:
            site_id: Site identifier
            before: Exclusive upper bound

        Returns:
            Set of visitor ids

        Raises:
            EventStoreError: If the store cannot be read
        """
        ...

    async def close(self) -> None:
        """Release resources. Default is a no-op."""
        return None
