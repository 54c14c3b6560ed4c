# ==============================================================================
# TrafficLens CLI
# ==============================================================================
"""
Command-line interface for the traffic analytics engine.

Usage:
    trafficlens --help
    trafficlens stats SITE_ID --range 7d --profile slow
    trafficlens classify /shop /product/red-shoe /cart
    trafficlens config show
"""

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
import os

import typer

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="trafficlens",
    help="Traffic analytics and website classification CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Stats command is imported from trafficlens.cli.stats
from trafficlens.cli.stats import stats_show

app.command("stats")(stats_show)

# Classify command is imported from trafficlens.cli.classify
from trafficlens.cli.classify import classify_paths

app.command("classify")(classify_paths)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from trafficlens.cli.config import config_show

config_app.command("show")(config_show)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    from trafficlens.cli.shared import configure_logging

    configure_logging()
    app()


if __name__ == "__main__":
    main()
