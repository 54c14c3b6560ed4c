# ==============================================================================
# Classify Command
# ==============================================================================
"""
Website-type classification from a list of paths or a page view export.
"""

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
)
from trafficlens.core.intelligence import build_intelligence
from trafficlens.core.models import WebsiteIntelligence
from trafficlens.infrastructure.cache import MemoryCache
from trafficlens.infrastructure.event_store import InMemoryEventStore
from trafficlens.services.intelligence import IntelligenceService
from trafficlens.utils.config import get_settings

# Number of runner-up categories listed under the winner
TOP_SCORES = 5


def _print_intelligence(label: str, intel: WebsiteIntelligence) -> None:
    print()
    print(_box_header(f"WEBSITE INTELLIGENCE {I.BULLET} {label}"))
    print(_empty_line())
    print(_kv_line("Type", f"{C.BOLD}{intel.type.value}{C.RESET}"))
    print(_kv_line("Confidence", f"{intel.confidence}%"))
    print(_kv_line("Source", intel.source))
    if intel.content_analysis is not None:
        analysis = intel.content_analysis
        print(_kv_line("Purpose", analysis.primary_purpose))
        print(_kv_line("Content quality", analysis.content_quality))
        print(_kv_line("Update frequency", analysis.update_frequency))
        print(_kv_line("SEO score", str(analysis.seo_score)))
    if intel.characteristics:
        print(_empty_line())
        print(_section_header("Characteristics"))
        for characteristic in intel.characteristics:
            print(_kv_line(f"  {I.BULLET}", characteristic))
    print(_empty_line())
    print(_box_bottom())

    ranked = sorted(intel.pattern_scores.items(), key=lambda kv: kv[1], reverse=True)
    table = Table(title="Top Pattern Scores", show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("Score", justify="right")
    for name, score in ranked[:TOP_SCORES]:
        table.add_row(name, f"{score:g}")
    print()
    Console().print(table)
    print()


# ==============================================================================
# Commands
# ==============================================================================


def classify_paths(
    paths: Annotated[
        Optional[list[str]], typer.Argument(help="Page paths to classify, e.g. /product/shoe")
    ] = None,
    events_file: Annotated[
        Optional[Path],
        typer.Option(
            "--events-file",
            "-f",
            help="Classify the page views in a JSON export instead of PATHS",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    domain: Annotated[
        str, typer.Option("--domain", "-d", help="Domain sent to the recommendation service")
    ] = "localhost",
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Guess a site's business category from the paths its visitors view.

    With --events-file the page views are analyzed through the intelligence
    service, which consults the remote recommendation service when
    CLASSIFIER_REMOTE_ENABLED is set and falls back to local heuristics.

    Examples:
        trafficlens classify /shop /product/red-shoe /cart /checkout
        trafficlens classify -f export.json --domain shop.example.com --json
    """
    if events_file is not None:
        events = InMemoryEventStore.from_json_file(events_file).events
        settings = get_settings()
        service = IntelligenceService(MemoryCache(), settings=settings.classifier)
        intel = service.analyze(domain, events)
        label = domain
    elif paths:
        intel = build_intelligence(paths)
        label = f"{len(paths)} paths"
    else:
        raise typer.BadParameter("Provide PATHS or --events-file")

    if json_output:
        print(json.dumps(intel.to_dict(), indent=2))
        return

    _print_intelligence(label, intel)
