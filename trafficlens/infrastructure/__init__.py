# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations of the ports in trafficlens.base:
- cache/ - Result cache adapters (in-memory, Valkey/Redis)
- event_store/ - Page view sources (PostgreSQL, in-memory)
- recommendations.py - Remote website-intelligence service client
"""

from trafficlens.infrastructure.cache import MemoryCache, ValkeyCache, create_cache
from trafficlens.infrastructure.event_store import (
    InMemoryEventStore,
    PostgreSQLEventStore,
    check_postgres_connection,
    parse_page_views,
)
from trafficlens.infrastructure.recommendations import RecommendationClient

__all__ = [
    # Cache
    "MemoryCache",
    "ValkeyCache",
    "create_cache",
    # Event stores
    "InMemoryEventStore",
    "PostgreSQLEventStore",
    "check_postgres_connection",
    "parse_page_views",
    # Recommendations
    "RecommendationClient",
]
