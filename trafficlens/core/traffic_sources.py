# ==============================================================================
# Traffic-Source Attributor
# ==============================================================================
"""
Groups visitors by acquisition source.

Visitor counts and bounce rates are measured. Cost, conversion rate and
revenue are NOT measured: they come from SOURCE_ESTIMATES, a table of
illustrative planning constants, multiplied by an assumed average order
value. Treat them as configuration, not facts about the site.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from trafficlens.core.formatting import format_source
from trafficlens.core.models import PageViewEvent, TrafficSource
from trafficlens.core.ratios import percent
from trafficlens.core.sessions import group_by_visitor

PerformanceRating = Literal["excellent", "good", "fair", "poor"]


@dataclass(frozen=True)
class SourceEstimate:
    """Assumed acquisition cost and conversion rate for one source."""

    cost: float
    conversion_rate: float


# Keyed by display name (see format_source)
SOURCE_ESTIMATES: dict[str, SourceEstimate] = {
    "Google": SourceEstimate(cost=500, conversion_rate=0.04),
    "Facebook": SourceEstimate(cost=300, conversion_rate=0.03),
    "Instagram": SourceEstimate(cost=200, conversion_rate=0.025),
    "Twitter": SourceEstimate(cost=150, conversion_rate=0.02),
    "LinkedIn": SourceEstimate(cost=400, conversion_rate=0.05),
    "Direct": SourceEstimate(cost=0, conversion_rate=0.06),
}
DEFAULT_ESTIMATE = SourceEstimate(cost=100, conversion_rate=0.02)
AVERAGE_ORDER_VALUE = 89


def estimate_for(display_name: str) -> SourceEstimate:
    return SOURCE_ESTIMATES.get(display_name, DEFAULT_ESTIMATE)


def calculate_roi(cost: float, revenue: float) -> float | None:
    """Return on investment in percent, or None when there is no spend."""
    if not cost:
        return None
    return round((revenue - cost) / cost * 100, 1)


def performance_rating(
    roi: float | None, conversion_rate: float, bounce_rate: float
) -> PerformanceRating:
    """
    Rate a source by ROI, or by engagement when ROI is unavailable.

    Args:
        roi: ROI percentage, or None
        conversion_rate: Conversion rate in percent
        bounce_rate: Bounce rate in percent
    """
    if roi is not None:
        if roi > 200:
            return "excellent"
        if roi > 50:
            return "good"
        if roi > 0:
            return "fair"
        return "poor"

    score = conversion_rate * 3 + (100 - bounce_rate) * 0.1
    if score > 20:
        return "excellent"
    if score > 10:
        return "good"
    if score > 5:
        return "fair"
    return "poor"


def sources(events: Sequence[PageViewEvent]) -> list[TrafficSource]:
    """
    Attribute visitors to acquisition sources.

    A visitor counts toward every source they arrived from. A visitor bounces
    when they have exactly one page view in the whole window, whichever
    source it came from.

    Args:
        events: Page views in the current window

    Returns:
        TrafficSource entries sorted by visitor count descending
    """
    by_visitor = group_by_visitor(events)
    bounced = {visitor for visitor, evs in by_visitor.items() if len(evs) == 1}

    visitors_by_source: dict[str, set[str]] = {}
    for event in events:
        visitors_by_source.setdefault(event.source_key, set()).add(event.visitor_id)

    results = []
    for source_key, visitors in visitors_by_source.items():
        name = format_source(source_key)
        estimate = estimate_for(name)
        visitor_count = len(visitors)
        bounce_rate = percent(len(visitors & bounced), visitor_count)
        conversion_rate = round(estimate.conversion_rate * 100, 1)
        revenue = float(round(visitor_count * estimate.conversion_rate * AVERAGE_ORDER_VALUE))
        roi = calculate_roi(estimate.cost, revenue)
        results.append(
            TrafficSource(
                source=name,
                source_key=source_key,
                visitors=visitor_count,
                bounce_rate=bounce_rate,
                conversion_rate=conversion_rate,
                cost=float(estimate.cost),
                revenue=revenue,
                roi=roi,
                performance_rating=performance_rating(roi, conversion_rate, bounce_rate),
            )
        )

    results.sort(key=lambda s: (-s.visitors, s.source_key))
    return results

