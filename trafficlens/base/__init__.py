# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the ports of the ports-and-adapters architecture.

Concrete adapters live in trafficlens.infrastructure.
"""

from trafficlens.base.cache import Cache
from trafficlens.base.event_store import EventStore

__all__ = [
    "Cache",
    "EventStore",
]
