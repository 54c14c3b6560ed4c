# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (PageViewEvent, Session, AggregateResult, Classification)
- Session reconstruction and the aggregations built on it
- The website-type catalog and classifier

All code here is framework-agnostic and easily unit-testable.
"""

from trafficlens.core.classifier import classify
from trafficlens.core.exit_pages import exit_pages
from trafficlens.core.funnel import funnel
from trafficlens.core.intelligence import build_intelligence
from trafficlens.core.metrics import aggregate, compute_trends, recent_visitors
from trafficlens.core.models import (
    AggregateResult,
    Classification,
    CoreMetrics,
    PageViewEvent,
    Session,
    WebsiteIntelligence,
)
from trafficlens.core.sessions import SessionReconstructor, reconstruct
from trafficlens.core.traffic_sources import sources
from trafficlens.core.website_types import WebsiteType

__all__ = [
    # Models
    "AggregateResult",
    "Classification",
    "CoreMetrics",
    "PageViewEvent",
    "Session",
    "WebsiteIntelligence",
    "WebsiteType",
    # Aggregation
    "SessionReconstructor",
    "aggregate",
    "compute_trends",
    "exit_pages",
    "funnel",
    "recent_visitors",
    "reconstruct",
    "sources",
    # Classification
    "build_intelligence",
    "classify",
]
