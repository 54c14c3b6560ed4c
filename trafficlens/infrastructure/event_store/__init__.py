# ==============================================================================
# Event Store Infrastructure
# ==============================================================================
"""
EventStore implementations.

Available implementations:
- PostgreSQLEventStore: page views read from PostgreSQL via psycopg2
- InMemoryEventStore: page views held in memory (tests, JSON exports)
"""

from trafficlens.infrastructure.event_store.memory import InMemoryEventStore
from trafficlens.infrastructure.event_store.postgresql import (
    PostgreSQLEventStore,
    check_postgres_connection,
)
from trafficlens.infrastructure.event_store.rows import parse_page_views

__all__ = [
    "InMemoryEventStore",
    "PostgreSQLEventStore",
    "check_postgres_connection",
    "parse_page_views",
]
