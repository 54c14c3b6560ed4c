# ==============================================================================
# Website-Type Classifier
# ==============================================================================
"""
Scores a site's observed paths against the website type catalog.

Scoring:
- Keywords: weight x number of unique paths containing the keyword
- Regexes: 3 x number of unique paths matching the regex
- Structural boosts from URL shape (product, category, date, search and
  deep paths)

Confidence grows with the winning score and its lead over the runner-up,
and is adjusted for corroborating technical signals and sample quality.
"""

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence

from trafficlens.core.models import (
    Classification,
    PageViewEvent,
    TechnicalSignals,
    UrlStructureStats,
)
from trafficlens.core.ratios import safe_ratio
from trafficlens.core.website_types import DEFAULT_TYPE, PATTERNS, WebsiteType

REGEX_WEIGHT = 3
EXAMPLE_PATH_LIMIT = 6
DEEP_PATH_DEPTH = 4
DEEP_PATH_SHARE = 0.2

MIN_CONFIDENCE = 20
MAX_CONFIDENCE = 99
SMALL_SAMPLE_EVENTS = 5
SINGLE_SEGMENT_SHARE = 0.8

PRODUCT_PATTERN = re.compile(r"(/product/|/products/|/p/|/item/|/shop/)")
CATEGORY_PATTERN = re.compile(r"(/category/|/collection/|/cat/|/dept/)")
DATE_PATTERN = re.compile(r"\d{4}/\d{2}/\d{2}")
SEARCH_PATTERN = re.compile(r"(search|q=|query=|filter)")

# (stat attribute, {type: points per matching path})
STRUCTURAL_BOOSTS: tuple[tuple[str, dict[WebsiteType, int]], ...] = (
    ("product_patterns", {WebsiteType.ECOMMERCE: 8, WebsiteType.MARKETPLACE: 3}),
    ("category_patterns", {WebsiteType.ECOMMERCE: 4, WebsiteType.BLOG: 2}),
    ("date_patterns", {WebsiteType.NEWS: 5, WebsiteType.BLOG: 3}),
    (
        "search_patterns",
        {WebsiteType.ECOMMERCE: 3, WebsiteType.DIRECTORY: 3, WebsiteType.MARKETPLACE: 3},
    ),
)
DEEP_PATH_BOOSTS = {WebsiteType.SAAS: 2, WebsiteType.DOCUMENTATION: 1}


def path_depth(path: str) -> int:
    """Number of non-empty segments in a path."""
    return len([segment for segment in path.split("/") if segment])


def unique_paths(paths: Iterable[str]) -> list[str]:
    """Lowercased paths, de-duplicated in first-seen order."""
    return list(dict.fromkeys(p.lower() for p in paths))


def analyze_url_structure(paths: Sequence[str]) -> UrlStructureStats:
    """
    Count structural URL patterns over a set of paths.

    Args:
        paths: Lowercased unique paths

    Returns:
        UrlStructureStats with pattern counts and depth distribution
    """
    stats = UrlStructureStats()
    depths: Counter[int] = Counter()
    for path in paths:
        depth = path_depth(path)
        depths[depth] += 1
        if depth <= 1:
            stats.single_page_count += 1
        if depth >= DEEP_PATH_DEPTH:
            stats.deep_paths += 1
        if PRODUCT_PATTERN.search(path):
            stats.product_patterns += 1
        if CATEGORY_PATTERN.search(path):
            stats.category_patterns += 1
        if DATE_PATTERN.search(path):
            stats.date_patterns += 1
        if SEARCH_PATTERN.search(path):
            stats.search_patterns += 1
        if len(stats.example_paths) < EXAMPLE_PATH_LIMIT:
            stats.example_paths.append(path)
    stats.depth_distribution = dict(sorted(depths.items()))
    return stats


def technical_signals(
    paths: Sequence[str],
    url_stats: UrlStructureStats,
    events: Sequence[PageViewEvent] = (),
) -> TechnicalSignals:
    """
    Infer site features from paths and, when available, page views.

    Args:
        paths: Lowercased unique paths
        url_stats: Structure stats for the same paths
        events: Page views used for load-time and device signals
    """

    def any_contains(*needles: str) -> bool:
        return any(n in p for p in paths for n in needles)

    signals = TechnicalSignals(
        has_search=any_contains("search", "q=", "query"),
        has_filters=any_contains("filter", "sort", "category"),
        has_recommendations=any_contains("recommend", "related", "similar"),
        has_blog=any_contains("blog", "article", "news", "post"),
        has_ecommerce=(
            any_contains("product", "cart", "checkout", "shop") or url_stats.product_patterns > 0
        ),
        has_forms=any_contains("contact", "form", "signup", "login"),
    )
    if events:
        signals.average_load_time = round(
            safe_ratio(sum(e.seconds_on_page for e in events), len(events)), 1
        )
        mobile = sum(1 for e in events if e.device and "mobile" in e.device.lower())
        signals.mobile_optimized = safe_ratio(mobile, len(events)) > 0.35
    return signals


def score_patterns(paths: Sequence[str], url_stats: UrlStructureStats) -> dict[WebsiteType, float]:
    """
    Score every catalog category against a set of unique paths.

    Args:
        paths: Lowercased unique paths
        url_stats: Structure stats for the same paths

    Returns:
        Score per category, in catalog declaration order
    """
    scores: dict[WebsiteType, float] = {}
    for website_type, patterns in PATTERNS.items():
        score = 0.0
        for keyword, weight in patterns.keywords:
            score += weight * sum(1 for p in paths if keyword in p)
        for regex in patterns.url_regexes:
            score += REGEX_WEIGHT * sum(1 for p in paths if regex.search(p))
        scores[website_type] = score

    for attribute, boosts in STRUCTURAL_BOOSTS:
        count = getattr(url_stats, attribute)
        for website_type, points in boosts.items():
            scores[website_type] += count * points

    if url_stats.deep_paths > len(paths) * DEEP_PATH_SHARE:
        for website_type, points in DEEP_PATH_BOOSTS.items():
            scores[website_type] += url_stats.deep_paths * points

    return scores


def pick_winner(scores: dict[WebsiteType, float]) -> WebsiteType:
    """Highest-scoring category; ties go to the earlier catalog entry."""
    best = max(scores.values(), default=0)
    if best <= 0:
        return DEFAULT_TYPE
    return next(t for t, s in scores.items() if s == best)


def compute_confidence(
    scores: dict[WebsiteType, float],
    winner: WebsiteType,
    url_stats: UrlStructureStats,
    technical: TechnicalSignals,
    event_count: int,
    path_count: int,
) -> int:
    """
    Heuristic confidence in the detected category, clamped to [20, 99].

    Args:
        scores: Score per category
        winner: Detected category
        url_stats: Structure stats for the unique paths
        technical: Technical signals for the same paths
        event_count: Number of page views behind the sample
        path_count: Number of unique paths
    """
    ranked = sorted(scores.values(), reverse=True)
    max_score = ranked[0] if ranked else 0.0
    second_score = ranked[1] if len(ranked) > 1 else 0.0

    confidence = 30 + 6 * math.log1p(max_score) + 2 * (max_score - second_score)

    if (
        winner in (WebsiteType.ECOMMERCE, WebsiteType.MARKETPLACE)
        and technical.has_ecommerce
        and url_stats.product_patterns > 0
    ):
        confidence += 8
    if event_count < SMALL_SAMPLE_EVENTS:
        confidence -= 12
    if safe_ratio(url_stats.single_page_count, path_count) > SINGLE_SEGMENT_SHARE:
        confidence -= 10

    return int(round(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))))


def classify(
    paths: Sequence[str],
    event_count: int | None = None,
    events: Sequence[PageViewEvent] = (),
) -> Classification:
    """
    Infer a site's business category from the paths its visitors viewed.

    Args:
        paths: Observed paths (duplicates allowed)
        event_count: Number of page views behind the paths. Defaults to
            len(paths).
        events: Page views, used only for device and load-time signals

    Returns:
        Classification with type, confidence and supporting statistics
    """
    uniq = unique_paths(paths)
    url_stats = analyze_url_structure(uniq)
    technical = technical_signals(uniq, url_stats, events)
    scores = score_patterns(uniq, url_stats)
    winner = pick_winner(scores)
    confidence = compute_confidence(
        scores,
        winner,
        url_stats,
        technical,
        event_count=len(paths) if event_count is None else event_count,
        path_count=len(uniq),
    )
    return Classification(
        type=winner,
        confidence=confidence,
        pattern_scores={t.value: s for t, s in scores.items()},
        url_stats=url_stats,
        technical=technical,
    )
