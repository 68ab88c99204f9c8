# ==============================================================================
# Tests for CLI Commands
# ==============================================================================
"""
Tests for the `summary`, `users`, `user` and `config show` commands.

Visits are read from a JSON export in tmp_path via --file, so no backend
is contacted. The backend path is covered by patching fetch_page_visits
where the CLI imports it.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pagevisits.app import app
from pagevisits.cli.shared import DATETIME_FORMAT, format_instant
from pagevisits.infrastructure.records import SourceError

runner = CliRunner()

_FETCH_PATH = "pagevisits.cli.shared.fetch_page_visits"


@pytest.fixture()
def visits_file(tmp_path, sample_visits):
    path = tmp_path / "visits.json"
    path.write_text(json.dumps([visit.model_dump(mode="json") for visit in sample_visits]))
    return path


@pytest.fixture()
def empty_file(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]")
    return path


# ==============================================================================
# summary
# ==============================================================================


class TestSummary:
    """Tests for `pagevisits summary`."""

    def test_json(self, visits_file):
        result = runner.invoke(
            app, ["summary", "--file", str(visits_file), "--today", "2024-06-30", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_visits"] == 50
        assert data["unique_users"] == 3
        assert len(data["visits_by_day"]) == 30
        assert data["visits_by_day"][-1]["day"] == "2024-06-30"
        assert sum(day["visits"] for day in data["visits_by_day"]) == 50

    def test_json_recent_visits(self, visits_file, sample_visits):
        result = runner.invoke(app, ["summary", "-f", str(visits_file), "--json"])
        assert result.exit_code == 0
        recent = json.loads(result.stdout)["recent_visits"]
        assert [visit["id"] for visit in recent] == [visit.id for visit in sample_visits[:10]]
        assert recent[0]["email"] == "alice@example.com"

    def test_recent_visits_limit_from_settings(self, visits_file, monkeypatch):
        monkeypatch.setenv("ANALYTICS_RECENT_VISITS_LIMIT", "3")
        result = runner.invoke(app, ["summary", "-f", str(visits_file), "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["recent_visits"]) == 3

    def test_table(self, visits_file):
        result = runner.invoke(app, ["summary", "-f", str(visits_file), "--today", "2024-06-30"])
        assert result.exit_code == 0
        assert "PAGE VISIT ANALYTICS" in result.output
        assert "Top Pages" in result.output
        assert "Traffic Sources" in result.output
        assert "Direct" in result.output
        assert "2024-06-30" in result.output
        assert "Recent Page Visits" in result.output
        assert "alice@example.com" in result.output

    def test_empty_file(self, empty_file):
        result = runner.invoke(app, ["summary", "-f", str(empty_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_visits"] == 0
        assert data["top_pages"] == []
        assert data["recent_visits"] == []
        assert all(day["visits"] == 0 for day in data["visits_by_day"])

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["summary", "-f", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Cannot read" in result.output

    @patch(_FETCH_PATH)
    def test_fetches_without_file(self, mock_fetch, sample_visits):
        mock_fetch.return_value = sample_visits
        result = runner.invoke(app, ["summary", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["total_visits"] == 50
        mock_fetch.assert_called_once()

    @patch(_FETCH_PATH, side_effect=SourceError("backend down"))
    def test_source_error(self, mock_fetch):
        result = runner.invoke(app, ["summary", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"error": "backend down"}


# ==============================================================================
# users / user
# ==============================================================================


class TestUsers:
    """Tests for `pagevisits users`."""

    def test_json(self, visits_file):
        result = runner.invoke(app, ["users", "-f", str(visits_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [u["email"] for u in data] == [
            "alice@example.com",
            "bob@example.com",
            "carol@example.com",
        ]
        assert [u["visit_count"] for u in data] == [25, 15, 10]

    def test_limit(self, visits_file):
        result = runner.invoke(app, ["users", "-f", str(visits_file), "--limit", "1", "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 1

    def test_table(self, visits_file):
        result = runner.invoke(app, ["users", "-f", str(visits_file)])
        assert result.exit_code == 0
        assert "alice@example.com" in result.output

    def test_empty(self, empty_file):
        result = runner.invoke(app, ["users", "-f", str(empty_file)])
        assert result.exit_code == 0
        assert "No users found" in result.output


class TestUser:
    """Tests for `pagevisits user EMAIL`."""

    def test_json(self, visits_file):
        result = runner.invoke(app, ["user", "bob@example.com", "-f", str(visits_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["user"]["visit_count"] == 15
        assert sum(p["count"] for p in data["detail"]["pages"]) == 15
        assert sum(r["count"] for r in data["detail"]["referrers"]) == 15
        assert len(data["detail"]["visits"]) == 15

    def test_table(self, visits_file):
        result = runner.invoke(app, ["user", "carol@example.com", "-f", str(visits_file)])
        assert result.exit_code == 0
        assert "USER PROFILE" in result.output
        assert "Pages Visited" in result.output
        assert "Visit History" in result.output

    def test_unknown_user(self, visits_file):
        result = runner.invoke(app, ["user", "nobody@example.com", "-f", str(visits_file)])
        assert result.exit_code == 1
        assert "User not found: nobody@example.com" in result.output


# ==============================================================================
# config show
# ==============================================================================


class TestConfigShow:
    """Tests for `pagevisits config show`."""

    def test_json(self, monkeypatch):
        monkeypatch.setenv("XANO_BASE_URL", "https://api.example.test/api:abc")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["api"]["url"] == "https://api.example.test/api:abc/page_visits"
        assert data["analytics"]["daily_window_days"] == 30
        assert data["analytics"]["timezone"] == "UTC"

    def test_human_readable(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Configuration" in result.output
        assert "Daily window" in result.output


# ==============================================================================
# Invalid configuration
# ==============================================================================


class TestInvalidConfiguration:
    """Commands exit cleanly when the environment holds invalid settings."""

    def test_unknown_timezone(self, visits_file, monkeypatch):
        monkeypatch.setenv("ANALYTICS_TIMEZONE", "Mars/Olympus_Mons")
        result = runner.invoke(app, ["summary", "-f", str(visits_file)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "Unknown time zone" in result.output

    def test_window_below_one_json(self, visits_file, monkeypatch):
        monkeypatch.setenv("ANALYTICS_DAILY_WINDOW_DAYS", "0")
        result = runner.invoke(app, ["summary", "-f", str(visits_file), "--json"])
        assert result.exit_code == 1
        error = json.loads(result.stdout)["error"]
        assert error.startswith("Invalid configuration: daily_window_days")

    def test_config_show(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_TOP_PAGES_LIMIT", "-1")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "top_pages_limit" in result.output


# ==============================================================================
# Display helpers
# ==============================================================================


class TestFormatInstant:
    """Tests for the shared date display helper."""

    def test_in_configured_zone(self):
        assert format_instant("2024-06-30T23:30:00-02:00", DATETIME_FORMAT) == "Jul 01, 2024 01:30"

    def test_unparseable(self):
        assert format_instant("garbage") == "Unknown"

    def test_beyond_range_in_display_zone_keeps_offset(self):
        assert format_instant("9999-12-31T23:00:00-05:00", DATETIME_FORMAT) == "Dec 31, 9999 23:00"
