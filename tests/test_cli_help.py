# ==============================================================================
# Tests for the CLI
# ==============================================================================
"""
Tests that the CLI command tree is wired up and its commands run.

Verifies that every command and subcommand in the trafficlens CLI:
- Exits with code 0 when invoked with --help
- Contains the expected description text
- Lists the expected subcommands or options

These tests use the real app from trafficlens.app (not minimal Typer apps).
Commands that need page views read a JSON export from tmp_path, so no
database is needed.
"""

import json
from datetime import datetime, timedelta, timezone

from typer.testing import CliRunner

from trafficlens.app import app

runner = CliRunner()


# ==============================================================================
# Help Output
# ==============================================================================


class TestRootHelp:
    """Tests for the root `trafficlens --help` output."""

    def test_exit_code(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0

    def test_description(self):
        result = runner.invoke(app, ["--help"])
        assert "Traffic analytics and website classification CLI" in result.output

    def test_lists_all_subcommands(self):
        result = runner.invoke(app, ["--help"])
        for cmd in ["classify", "config", "stats"]:
            assert cmd in result.output, f"Missing command: {cmd}"


class TestStatsHelp:
    """Tests for `trafficlens stats --help`."""

    def test_exit_code(self):
        result = runner.invoke(app, ["stats", "--help"])
        assert result.exit_code == 0

    def test_lists_options(self):
        result = runner.invoke(app, ["stats", "--help"])
        for option in ["--range", "--profile", "--events-file", "--json"]:
            assert option in result.output, f"Missing option: {option}"


class TestClassifyHelp:
    """Tests for `trafficlens classify --help`."""

    def test_exit_code(self):
        result = runner.invoke(app, ["classify", "--help"])
        assert result.exit_code == 0

    def test_lists_options(self):
        result = runner.invoke(app, ["classify", "--help"])
        for option in ["--events-file", "--domain", "--json"]:
            assert option in result.output, f"Missing option: {option}"


class TestConfigHelp:
    """Tests for `trafficlens config --help`."""

    def test_exit_code(self):
        result = runner.invoke(app, ["config", "--help"])
        assert result.exit_code == 0

    def test_lists_subcommands(self):
        result = runner.invoke(app, ["config", "--help"])
        assert "show" in result.output


# ==============================================================================
# Commands
# ==============================================================================


def _write_events(tmp_path, rows):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(rows))
    return path


class TestConfigShow:
    def test_json(self):
        result = runner.invoke(app, ["config", "show", "--json"])

        assert result.exit_code == 0
        config = json.loads(result.stdout)
        assert set(config["network_profiles"]) == {"fast", "medium", "slow", "offline"}
        assert config["network_profiles"]["slow"]["max_window_days"] == 14
        assert "session_timeout_minutes" in config["analytics"]

    def test_human(self):
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Configuration" in result.output


class TestClassifyCommand:
    def test_paths_json(self):
        result = runner.invoke(
            app, ["classify", "/product/1", "/product/2", "/cart", "/checkout", "--json"]
        )

        assert result.exit_code == 0
        intel = json.loads(result.stdout)
        assert intel["type"] == "ecommerce"
        assert intel["source"] == "local"

    def test_human(self):
        result = runner.invoke(app, ["classify", "/blog/hello-world", "/blog/second-post"])

        assert result.exit_code == 0
        assert "WEBSITE INTELLIGENCE" in result.output

    def test_requires_input(self):
        result = runner.invoke(app, ["classify"])
        assert result.exit_code != 0


class TestStatsCommand:
    def test_json_from_events_file(self, tmp_path):
        now = datetime.now(timezone.utc)
        rows = [
            {
                "visitor_id": "v1",
                "path": path,
                "created_at": (now - timedelta(minutes=30 - i * 5)).isoformat(),
            }
            for i, path in enumerate(["/", "/cart", "/checkout"])
        ]
        events_file = _write_events(tmp_path, rows)

        result = runner.invoke(
            app, ["stats", "site-1", "--range", "24h", "-f", str(events_file), "--json"]
        )

        assert result.exit_code == 0
        stats = json.loads(result.stdout)
        assert stats["realData"] is True
        assert stats["totalPageViews"] == 3
        assert stats["totalSessions"] == 1
        assert len(stats["conversionFunnel"]) == 3

    def test_no_data_exits_nonzero(self, tmp_path):
        events_file = _write_events(tmp_path, [])

        result = runner.invoke(app, ["stats", "site-1", "-f", str(events_file)])

        assert result.exit_code == 1

    def test_invalid_range(self, tmp_path):
        events_file = _write_events(tmp_path, [])

        result = runner.invoke(app, ["stats", "site-1", "-r", "fortnight", "-f", str(events_file)])

        assert result.exit_code != 0
