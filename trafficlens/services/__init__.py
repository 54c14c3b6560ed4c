# ==============================================================================
# Application Services
# ==============================================================================
"""
Request-level orchestration over the core logic and the infrastructure adapters.
"""

from trafficlens.services.analytics import AnalyticsService
from trafficlens.services.intelligence import IntelligenceService

__all__ = [
    "AnalyticsService",
    "IntelligenceService",
]
