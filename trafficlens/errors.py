# ==============================================================================
# Exceptions
# ==============================================================================
"""
Exception hierarchy for the analytics engine.

Service boundaries catch these and degrade to empty or locally computed
results; core computations never raise for empty input.
"""


class TrafficLensError(Exception):
    """Base class for all analytics engine errors."""


class EventStoreError(TrafficLensError):
    """The event store could not return page views for a window."""


class RecommendationServiceError(TrafficLensError):
    """The remote recommendation service failed or returned an unusable body."""
