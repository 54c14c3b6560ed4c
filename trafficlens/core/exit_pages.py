# ==============================================================================
# Exit-Page Analyzer
# ==============================================================================
"""
Per-path exit statistics.

A visitor's chronologically last page view in the window counts as one exit
at its path, regardless of session boundaries. Visits count every page view
at the path.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from trafficlens.core.models import ExitPage, PageViewEvent
from trafficlens.core.ratios import percent, safe_ratio
from trafficlens.core.sessions import group_by_visitor

TOP_EXIT_PAGES = 10


@dataclass
class _PathStats:
    visits: int = 0
    exits: int = 0
    total_time: float = 0.0


def exit_pages(events: Sequence[PageViewEvent], limit: int = TOP_EXIT_PAGES) -> list[ExitPage]:
    """
    Compute exit rates per path.

    Args:
        events: Page views in the current window
        limit: Number of paths returned

    Returns:
        ExitPage entries sorted by exit rate (then visits) descending
    """
    stats: dict[str, _PathStats] = {}

    for event in events:
        path_stats = stats.setdefault(event.path, _PathStats())
        path_stats.visits += 1
        path_stats.total_time += event.seconds_on_page

    for visitor_events in group_by_visitor(events).values():
        stats[visitor_events[-1].path].exits += 1

    pages = [
        ExitPage(
            url=path,
            exit_rate=percent(s.exits, s.visits),
            exits=s.exits,
            visits=s.visits,
            avg_time_on_page=round(safe_ratio(s.total_time, s.visits), 1),
        )
        for path, s in stats.items()
    ]
    pages.sort(key=lambda p: (-p.exit_rate, -p.visits, p.url))
    return pages[:limit]
