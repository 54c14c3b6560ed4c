# ==============================================================================
# PostgreSQL Event Store
# ==============================================================================
"""
PostgreSQL implementation of the EventStore interface.

Reads page views written by the tracking endpoint. psycopg2 is blocking, so
every query runs in a worker thread via asyncio.to_thread. Transient
connection errors are retried with a light tenacity policy; anything that
still fails surfaces as EventStoreError.
"""

import asyncio
import logging
from datetime import datetime

import psycopg2
from psycopg2.extras import RealDictCursor

from trafficlens.base.event_store import EventStore
from trafficlens.core.models import PageViewEvent
from trafficlens.errors import EventStoreError
from trafficlens.infrastructure.event_store.rows import parse_page_views
from trafficlens.utils.config import Settings, get_settings
from trafficlens.utils.retry import retry_light

logger = logging.getLogger(__name__)

# Connection timeout
CONNECT_TIMEOUT = 10

EVENT_COLUMNS = (
    "visitor_id",
    "path",
    "referrer",
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "created_at",
    "time_on_page",
    "site_id",
    "screen_width",
    "screen_height",
    "language",
    "timezone",
)

TRANSIENT_ERRORS = (psycopg2.OperationalError, psycopg2.InterfaceError)


def _add_connect_timeout(conn_string: str) -> str:
    """Add connect_timeout to connection string if not present."""
    if "connect_timeout" not in conn_string:
        separator = "&" if "?" in conn_string else "?"
        return f"{conn_string}{separator}connect_timeout={CONNECT_TIMEOUT}"
    return conn_string


class PostgreSQLEventStore(EventStore):
    """
    Page view store backed by a PostgreSQL table.

    Expects a table (default ``public.page_views``) with at least the columns
    in EVENT_COLUMNS. Each query opens a short-lived connection, so the store
    is safe to share across concurrent requests.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the event store.

        Args:
            settings: Application settings. If None, uses get_settings().
        """
        self._settings = settings or get_settings()
        self._schema = self._settings.postgres.schema_name
        self._table = f"{self._schema}.{self._settings.postgres.events_table}"

    @property
    def table(self) -> str:
        """Fully qualified page view table name."""
        return self._table

    def _connect(self) -> "psycopg2.extensions.connection":
        conn_string = _add_connect_timeout(self._settings.postgres.connection_string)
        return psycopg2.connect(conn_string)

    @retry_light(TRANSIENT_ERRORS, logger)
    def _query(self, query: str, params: tuple) -> list[dict]:
        conn = self._connect()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                return [dict(row) for row in cur.fetchall()]
        finally:
            conn.close()

    def _fetch_events_sync(self, site_id: str, start: datetime, end: datetime) -> list[dict]:
        columns = ", ".join(EVENT_COLUMNS)
        return self._query(
            f"""
            SELECT {columns}
            FROM {self._table}
            WHERE site_id = %s AND created_at >= %s AND created_at <= %s
            ORDER BY created_at
            """,
            (site_id, start, end),
        )

    def _fetch_visitor_ids_sync(self, site_id: str, before: datetime) -> list[dict]:
        return self._query(
            f"""
            SELECT DISTINCT visitor_id
            FROM {self._table}
            WHERE site_id = %s AND created_at < %s
            """,
            (site_id, before),
        )

    async def fetch_events(
        self, site_id: str, start: datetime, end: datetime
    ) -> list[PageViewEvent]:
        try:
            rows = await asyncio.to_thread(self._fetch_events_sync, site_id, start, end)
        except psycopg2.Error as e:
            raise EventStoreError(f"Failed to fetch page views for site {site_id}: {e}") from e
        events = list(parse_page_views(rows))
        logger.debug("Fetched %d page views for site %s", len(events), site_id)
        return events

    async def fetch_visitor_ids_before(self, site_id: str, before: datetime) -> set[str]:
        try:
            rows = await asyncio.to_thread(self._fetch_visitor_ids_sync, site_id, before)
        except psycopg2.Error as e:
            raise EventStoreError(
                f"Failed to fetch visitor history for site {site_id}: {e}"
            ) from e
        return {str(row["visitor_id"]) for row in rows if row.get("visitor_id") is not None}


def check_postgres_connection(settings: Settings | None = None) -> bool:
    """
    Check if PostgreSQL is reachable.

    Returns:
        True if a connection can be opened, False otherwise
    """
    settings = settings or get_settings()
    try:
        conn = psycopg2.connect(_add_connect_timeout(settings.postgres.connection_string))
        conn.close()
        return True
    except psycopg2.Error:
        return False
