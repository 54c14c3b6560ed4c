# ==============================================================================
# In-Memory Event Store
# ==============================================================================
"""
EventStore backed by a list of page views held in memory.

Used by tests and by the CLI when analysing an exported JSON file instead of
a live database.
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from trafficlens.base.event_store import EventStore
from trafficlens.core.models import PageViewEvent
from trafficlens.infrastructure.event_store.rows import parse_page_views

logger = logging.getLogger(__name__)


class InMemoryEventStore(EventStore):
    """Page views grouped by site id."""

    def __init__(self, rows: Iterable[dict[str, Any] | PageViewEvent] = ()):
        self._events: list[PageViewEvent] = []
        self.add(rows)

    @property
    def events(self) -> list[PageViewEvent]:
        """All stored page views, in insertion order."""
        return list(self._events)

    def add(self, rows: Iterable[dict[str, Any] | PageViewEvent]) -> int:
        """
        Add page views to the store.

        Returns:
            Count of rows accepted
        """
        parsed = list(parse_page_views(rows))
        self._events.extend(parsed)
        return len(parsed)

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryEventStore":
        """
        Load page views from a JSON file holding a list of row objects.

        Raises:
            ValueError: If the file does not contain a JSON list
        """
        data = json.loads(Path(path).read_text())
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON list of page views")
        store = cls(data)
        logger.info("Loaded %d page views from %s", len(store.events), path)
        return store

    def _for_site(self, site_id: str) -> list[PageViewEvent]:
        # Rows without a site id belong to every site
        return [e for e in self._events if e.site_id in (None, site_id)]

    async def fetch_events(
        self, site_id: str, start: datetime, end: datetime
    ) -> list[PageViewEvent]:
        events = [e for e in self._for_site(site_id) if start <= e.timestamp <= end]
        return sorted(events, key=lambda e: e.timestamp)

    async def fetch_visitor_ids_before(self, site_id: str, before: datetime) -> set[str]:
        return {e.visitor_id for e in self._for_site(site_id) if e.timestamp < before}
