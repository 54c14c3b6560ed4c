# ==============================================================================
# Local Website Intelligence
# ==============================================================================
"""
Heuristic site analysis built on top of the classifier.

This is the local half of the recommendation pipeline: it always succeeds,
needs no network, and is what callers get whenever the remote service is
disabled or unavailable.
"""

import re
from collections.abc import Sequence
from datetime import timedelta

from trafficlens.core.classifier import classify, unique_paths
from trafficlens.core.models import (
    ContentAnalysis,
    PageViewEvent,
    TechnicalSignals,
    UrlStructureStats,
    WebsiteIntelligence,
)
from trafficlens.core.ratios import safe_ratio
from trafficlens.core.website_types import PRIMARY_PURPOSES, TARGET_AUDIENCES, WebsiteType

# Page groups reported to the dashboard, each matched by substrings
DETECTED_PAGE_GROUPS: dict[str, tuple[str, ...]] = {
    "products": ("product", "/p/"),
    "categories": ("category", "collection"),
    "checkout": ("checkout", "cart"),
    "content": ("blog", "article"),
    "features": ("feature", "pricing"),
    "pricing": ("pricing", "plans"),
    "signup": ("signup", "register"),
    "contact": ("contact",),
    "about": ("about",),
    "services": ("service",),
    "sitemap": ("sitemap",),
}

_SLUG_PATTERN = re.compile(r"-[a-z0-9-]{3,}")


def detect_pages(paths: Sequence[str]) -> dict[str, list[str]]:
    """Group paths into well-known page kinds."""
    return {
        group: [p for p in paths if any(n in p for n in needles)]
        for group, needles in DETECTED_PAGE_GROUPS.items()
    }


def seo_hints(paths: Sequence[str], technical: TechnicalSignals) -> list[str]:
    hints = []
    if any("sitemap" in p for p in paths):
        hints.append("Sitemap detected - good for SEO")
    if any(_SLUG_PATTERN.search(p) for p in paths):
        hints.append("SEO-friendly slug URLs present")
    if any("tag" in p or "category" in p for p in paths):
        hints.append("Content categorization implemented")
    if technical.has_search:
        hints.append("On-site search functionality available")
    if technical.has_blog:
        hints.append("Blog content detected - content marketing opportunity")
    return hints


def content_quality(events: Sequence[PageViewEvent]) -> str:
    """Bucket average time on page: > 90s high, > 45s medium, else low."""
    if events:
        avg = safe_ratio(sum(e.seconds_on_page for e in events), len(events))
    else:
        avg = 30.0
    if avg > 90:
        return "high"
    if avg > 45:
        return "medium"
    return "low"


def update_frequency(events: Sequence[PageViewEvent]) -> str:
    """Bucket the mean gap between page views: < 1 day frequent, < 7 days regular."""
    if len(events) < 10:
        return "rare"
    timestamps = sorted(e.timestamp for e in events)
    gaps = [b - a for a, b in zip(timestamps, timestamps[1:])]
    mean_gap = sum(gaps, timedelta()) / len(gaps)
    if mean_gap < timedelta(days=1):
        return "frequent"
    if mean_gap < timedelta(days=7):
        return "regular"
    return "rare"


def characteristics(
    website_type: WebsiteType, paths: Sequence[str], event_count: int
) -> list[str]:
    chars = []
    if len(paths) > 10:
        chars.append("Content-rich website")
    if event_count > 50:
        chars.append("High traffic site")
    if website_type == WebsiteType.ECOMMERCE:
        chars.append("Product-focused")
    if website_type == WebsiteType.BLOG:
        chars.append("Content-driven")
    if any("mobile" in p for p in paths):
        chars.append("Mobile-optimized")
    return chars


def estimate_product_count(website_type: WebsiteType, url_stats: UrlStructureStats) -> int:
    count = url_stats.product_patterns * 3
    if website_type == WebsiteType.ECOMMERCE:
        count = max(count, 10)
    return count


def build_intelligence(
    paths: Sequence[str] | None = None, events: Sequence[PageViewEvent] = ()
) -> WebsiteIntelligence:
    """
    Run the full local analysis for a window of page views.

    Args:
        paths: Paths to classify. Defaults to the events' paths, or ["/"]
            when there are none.
        events: Page views in the window

    Returns:
        WebsiteIntelligence with source="local"
    """
    if paths is None:
        paths = [e.path for e in events] or ["/"]

    # Without page views the sample size is the number of paths
    event_count = len(events) if events else None
    classification = classify(paths, event_count=event_count, events=events)
    uniq = unique_paths(paths)
    technical = classification.technical
    technical.seo_hints = seo_hints(uniq, technical)
    url_stats = classification.url_stats

    analysis = ContentAnalysis(
        primary_purpose=PRIMARY_PURPOSES.get(classification.type, "General website purpose"),
        target_audience=TARGET_AUDIENCES.get(classification.type, ["General audience"]),
        content_quality=content_quality(events),
        update_frequency=update_frequency(events),
        seo_score=round(len(technical.seo_hints) * 25 + min(50, len(url_stats.example_paths) * 8)),
    )

    return WebsiteIntelligence(
        type=classification.type,
        confidence=classification.confidence,
        pattern_scores=classification.pattern_scores,
        characteristics=characteristics(classification.type, uniq, len(events)),
        product_count=estimate_product_count(classification.type, url_stats),
        detected_pages=detect_pages(uniq),
        technical_insights=technical,
        content_analysis=analysis,
        url_structure_stats=url_stats,
        source="local",
    )
