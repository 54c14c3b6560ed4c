# ==============================================================================
# Stats Command
# ==============================================================================
"""
Dashboard stats for one site, computed from the configured event store.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from trafficlens.cli.shared import (
    C,
    I,
    _box_bottom,
    _box_header,
    _empty_line,
    _kv_line,
    _section_header,
    format_duration,
    get_event_store,
)
from trafficlens.core.models import AggregateResult
from trafficlens.infrastructure.cache import MemoryCache
from trafficlens.infrastructure.event_store import check_postgres_connection
from trafficlens.services.analytics import AnalyticsService
from trafficlens.utils.config import get_settings
from trafficlens.utils.network import NetworkProfile, parse_range


def _trend(value: float) -> str:
    if value > 0:
        return f"{C.BRIGHT_GREEN}↑ {value:.1f}%{C.RESET}"
    if value < 0:
        return f"{C.BRIGHT_RED}↓ {abs(value):.1f}%{C.RESET}"
    return f"{C.DIM}→ 0.0%{C.RESET}"


def _print_summary(site_id: str, result: AggregateResult) -> None:
    print()
    print(_box_header(f"TRAFFIC STATS {I.BULLET} {site_id}"))
    print(_empty_line())
    trends = result.trends
    print(_kv_line("Visitors", f"{result.total_visitors:,}  {_trend(trends.total_visitors)}"))
    print(_kv_line("  New", f"{result.new_visitors:,}"))
    print(_kv_line("  Returning", f"{result.returning_visitors:,}"))
    print(_kv_line("Page views", f"{result.total_page_views:,}"))
    print(_kv_line("Sessions", f"{result.total_sessions:,}"))
    print(_empty_line())
    print(_section_header("Engagement"))
    print(_kv_line("Bounce rate", f"{result.bounce_rate:.1f}%  {_trend(trends.bounce_rate)}"))
    print(
        _kv_line(
            "Avg session duration",
            f"{format_duration(result.avg_session_duration)}  "
            f"{_trend(trends.avg_session_duration)}",
        )
    )
    print(
        _kv_line(
            "Pages per visit",
            f"{result.pages_per_visit:.1f}  {_trend(trends.pages_per_visit)}",
        )
    )
    print(_empty_line())
    print(_box_bottom())


def _print_tables(result: AggregateResult) -> None:
    console = Console()

    if result.conversion_funnel:
        table = Table(title="Conversion Funnel", show_header=True, header_style="bold")
        table.add_column("Stage")
        table.add_column("Visitors", justify="right")
        table.add_column("Drop-off", justify="right")
        for stage in result.conversion_funnel:
            table.add_row(
                stage.stage,
                f"{stage.visitors:,}",
                f"{stage.drop_off_count:,} ({stage.drop_off_rate:.1f}%)",
            )
        print()
        console.print(table)

    if result.exit_pages:
        table = Table(title="Top Exit Pages", show_header=True, header_style="bold")
        table.add_column("Page")
        table.add_column("Exits", justify="right")
        table.add_column("Visits", justify="right")
        table.add_column("Exit rate", justify="right")
        table.add_column("Avg time", justify="right")
        for page in result.exit_pages:
            table.add_row(
                page.url,
                f"{page.exits:,}",
                f"{page.visits:,}",
                f"{page.exit_rate:.1f}%",
                format_duration(page.avg_time_on_page),
            )
        print()
        console.print(table)

    if result.traffic_sources:
        table = Table(title="Traffic Sources (estimated economics)", header_style="bold")
        table.add_column("Source")
        table.add_column("Visitors", justify="right")
        table.add_column("Bounce", justify="right")
        table.add_column("Revenue", justify="right")
        table.add_column("ROI", justify="right")
        table.add_column("Rating")
        for source in result.traffic_sources:
            roi = "n/a" if source.roi is None else f"{source.roi:.1f}%"
            table.add_row(
                source.source,
                f"{source.visitors:,}",
                f"{source.bounce_rate:.1f}%",
                f"${source.revenue:,.0f}",
                roi,
                source.performance_rating,
            )
        print()
        console.print(table)
    print()


# ==============================================================================
# Commands
# ==============================================================================


def stats_show(
    site_id: Annotated[str, typer.Argument(help="Site identifier")],
    range_str: Annotated[
        Optional[str],
        typer.Option("--range", "-r", help="Query window: 24h, 7d, 30d or 90d"),
    ] = None,
    profile: Annotated[
        NetworkProfile,
        typer.Option("--profile", "-p", help="Client network profile (shortens the window)"),
    ] = NetworkProfile.FAST,
    events_file: Annotated[
        Optional[Path],
        typer.Option(
            "--events-file",
            "-f",
            help="Read page views from a JSON export instead of PostgreSQL",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Show visitor, engagement, funnel and source stats for a site.

    Examples:
        trafficlens stats my-site
        trafficlens stats my-site --range 7d --profile slow
        trafficlens stats my-site -f export.json --json
    """
    settings = get_settings()
    range_str = range_str or settings.analytics.default_range
    try:
        parse_range(range_str)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--range") from e

    service = AnalyticsService(
        get_event_store(events_file),
        MemoryCache(default_ttl_seconds=settings.analytics.cache_ttl_seconds),
        settings.analytics,
    )
    result = asyncio.run(service.get_stats(site_id, range_str, profile))

    if json_output:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if not result.real_data:
        print(
            f"\n{C.BRIGHT_YELLOW}{I.WARN} No page views for '{site_id}' in the last {range_str}"
            f"{C.RESET}"
        )
        if events_file is None and not check_postgres_connection(settings):
            print(f"  {C.DIM}PostgreSQL is unreachable; check the PG_* settings{C.RESET}")
        print()
        raise typer.Exit(1)

    _print_summary(site_id, result)
    _print_tables(result)
    refresh = service.get_refresh_interval(profile)
    print(f"  {C.DIM}Suggested refresh on a {profile.value} connection: {refresh}s{C.RESET}")
    print()
