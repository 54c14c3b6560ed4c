# ==============================================================================
# Funnel Builder
# ==============================================================================
"""
Derives a conversion funnel from the dominant visitor journey.

The canonical journey is the most frequent signature made of the first (up
to) four paths each visitor viewed. When no journey is usable the funnel
falls back to the most visited paths.
"""

from collections import Counter
from collections.abc import Sequence

from trafficlens.core.formatting import format_page_name
from trafficlens.core.models import FunnelStage, PageViewEvent
from trafficlens.core.ratios import percent
from trafficlens.core.sessions import group_by_visitor

JOURNEY_LENGTH = 4
FALLBACK_STAGES = 4


def _journey_signature(paths: list[str]) -> tuple[str, ...]:
    return tuple(paths[:JOURNEY_LENGTH])


def canonical_journey(sequences: list[list[str]]) -> tuple[str, ...] | None:
    """
    Pick the most frequent multi-step journey.

    A journey qualifies when it was taken by at least two visitors, or when it
    is the only journey in the window. Ties go to the journey seen first.

    Args:
        sequences: Chronological path sequence per visitor

    Returns:
        The canonical journey, or None if no journey qualifies
    """
    histogram = Counter(_journey_signature(seq) for seq in sequences if len(seq) >= 2)
    if not histogram:
        return None
    journey, count = histogram.most_common(1)[0]
    if count >= 2 or len(histogram) == 1:
        return journey
    return None


def _build_stages(paths: Sequence[str], reached: list[int]) -> list[FunnelStage]:
    stages = []
    for index, (path, visitors) in enumerate(zip(paths, reached)):
        drop_off, rate = 0, 0.0
        if index:
            previous = reached[index - 1]
            # A later stage reached by more visitors is not a drop-off
            drop_off = max(previous - visitors, 0)
            rate = percent(drop_off, previous)
        stages.append(
            FunnelStage(
                stage=format_page_name(path),
                path=path,
                visitors=visitors,
                drop_off_count=drop_off,
                drop_off_rate=rate,
            )
        )
    return stages


def funnel(events: Sequence[PageViewEvent]) -> list[FunnelStage]:
    """
    Build funnel stages with visitor counts and drop-off.

    Args:
        events: Page views in the current window

    Returns:
        Ordered FunnelStage list; empty for an empty window. Stage 0 always
        has zero drop-off.
    """
    if not events:
        return []

    sequences = [[e.path for e in evs] for evs in group_by_visitor(events).values()]
    total_visitors = len(sequences)
    page_counts = Counter(e.path for e in events)

    if len(page_counts) < 2:
        path = next(iter(page_counts), "homepage")
        return [
            FunnelStage(stage=format_page_name(path), path=path, visitors=total_visitors)
        ]

    journey = canonical_journey(sequences)
    if journey is not None:
        # Visitors whose first view of the stage path is at or before the stage index
        reached = [
            sum(1 for seq in sequences if path in seq and seq.index(path) <= index)
            for index, path in enumerate(journey)
        ]
        return _build_stages(journey, reached)

    top_paths = [path for path, _ in page_counts.most_common(FALLBACK_STAGES)]
    reached = [sum(1 for seq in sequences if path in seq) for path in top_paths]
    return _build_stages(top_paths, reached)
