"""Unit tests for history commands (list, export, clear)."""

from __future__ import annotations

import json
from datetime import datetime, timedelta

import pytest
from typer.testing import CliRunner

from studytimer_cli.exceptions import PersistenceWriteError
from studytimer_cli.main import app
from studytimer_cli.models.focus.history import parse_csv
from studytimer_cli.models.session import Session
from studytimer_cli.services.config_service import get_config_service
from studytimer_cli.services.session_store import SessionStore

runner = CliRunner()


def _seed(count: int, days_ago: int = 0, notes: str = "") -> SessionStore:
    store = SessionStore(get_config_service().get_storage())
    store.load()
    base = datetime.now().astimezone() - timedelta(days=days_ago)
    for i in range(count):
        store.append(
            Session(
                id=f"{days_ago}-{i}",
                timestamp=base - timedelta(minutes=count - i),
                duration=25,
                notes=notes,
                kind="study",
            )
        )
    return store


class TestHistoryList:
    def test_empty(self):
        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0, result.output
        assert "No sessions yet" in result.output

    def test_lists_sessions(self):
        _seed(2, notes="algebra")
        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0, result.output
        assert "Today" in result.output
        assert "25 min study" in result.output
        assert "algebra" in result.output

    def test_paginates_long_history(self):
        _seed(12)
        result = runner.invoke(app, ["history", "list"])
        assert "2 older sessions hidden" in result.output

    def test_show_all(self):
        _seed(12)
        result = runner.invoke(app, ["history", "list", "--all"])
        assert "hidden" not in result.output

    def test_json_is_newest_first(self):
        _seed(3)
        result = runner.invoke(app, ["history", "list", "-o", "json"])
        data = json.loads(result.output)
        assert [item["id"] for item in data] == ["0-2", "0-1", "0-0"]
        assert data[0]["type"] == "study"


class TestHistoryExport:
    def test_export_to_path(self, tmp_path):
        _seed(2, notes='ch. 1, "intro"')
        target = tmp_path / "export.csv"

        result = runner.invoke(app, ["history", "export", "--output", str(target)])

        assert result.exit_code == 0, result.output
        assert "Exported 2 sessions" in result.output
        rows = parse_csv(target.read_text(encoding="utf-8"))
        assert len(rows) == 2
        assert rows[0].notes == 'ch. 1, "intro"'

    def test_default_filename(self, tmp_path, monkeypatch):
        _seed(1)
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["history", "export"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "study-sessions.csv").exists()

    def test_nothing_to_export(self, tmp_path):
        target = tmp_path / "export.csv"
        result = runner.invoke(app, ["history", "export", "-o", str(target)])
        assert result.exit_code == 0
        assert "No sessions to export" in result.output
        assert not target.exists()

    def test_write_failure_exit_code(self, tmp_path, mocker):
        _seed(1)
        mocker.patch(
            "studytimer_cli.services.app_service.write_csv",
            side_effect=PersistenceWriteError("out.csv", "read-only file system"),
        )
        result = runner.invoke(app, ["history", "export", "-o", str(tmp_path / "out.csv")])
        assert result.exit_code == 3
        assert "Export failed" in result.output


class TestHistoryClear:
    def test_clear_with_yes(self):
        _seed(3)
        result = runner.invoke(app, ["history", "clear", "--yes"])
        assert result.exit_code == 0, result.output
        assert "Cleared 3 sessions" in result.output
        assert SessionStore(get_config_service().get_storage()).load() == []

    def test_clear_declined(self):
        _seed(3)
        result = runner.invoke(app, ["history", "clear"], input="n\n")
        assert "Cancelled" in result.output
        assert len(SessionStore(get_config_service().get_storage()).load()) == 3

    def test_clear_confirmed(self):
        _seed(1)
        result = runner.invoke(app, ["history", "clear"], input="y\n")
        assert "Cleared 1 sessions" in result.output
