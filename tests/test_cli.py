"""Mini README: Tests for the Typer command line entry point.

Each test points the settings at a temporary JSON store so commands run end
to end against real files.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from droneflow.configuration import get_settings
from droneflow_cli import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_store(tmp_path, monkeypatch):
    monkeypatch.setenv("DRONEFLOW_DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("DRONEFLOW_STORE_BACKEND", "json")
    monkeypatch.setenv("DRONEFLOW_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_close_list_and_reopen_month() -> None:
    assert runner.invoke(cli, ["seed-demo"]).exit_code == 0

    closed = runner.invoke(cli, ["close-month", "5", "2024"])
    assert closed.exit_code == 0, closed.output
    assert "Closed 5/2024" in closed.output

    listed = runner.invoke(cli, ["list-closed-months"])
    assert json.loads(listed.output)[0]["month_year"] == "5/2024"

    again = runner.invoke(cli, ["close-month", "5", "2024"])
    assert again.exit_code == 1

    reopened = runner.invoke(cli, ["reopen-month", "5/2024"])
    assert reopened.exit_code == 0
    assert json.loads(runner.invoke(cli, ["list-closed-months"]).output) == []


def test_compute_month_outputs_four_summaries() -> None:
    result = runner.invoke(cli, ["compute-month", "2", "2024"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["total_expenses"] == pytest.approx(5000.0)
    assert len(payload["partner_summaries"]) == 4


def test_contribution_commands_update_balances() -> None:
    added = runner.invoke(cli, ["add-contribution", "Patrick", "125.5", "--on", "2024-02-01"])
    assert added.exit_code == 0, added.output
    contribution_id = json.loads(added.output)["contribution_id"]

    balances = json.loads(runner.invoke(cli, ["balances", "--month", "2", "--year", "2024"]).output)
    patrick = next(entry for entry in balances if entry["short_id"] == "Patrick")
    assert patrick["balance"] == pytest.approx(-1250.0 + 125.5)

    removed = runner.invoke(cli, ["remove-contribution", contribution_id])
    assert removed.exit_code == 0
    assert runner.invoke(cli, ["remove-contribution", contribution_id]).exit_code == 1


def test_invalid_month_exits_with_error() -> None:
    result = runner.invoke(cli, ["compute-month", "13", "2024"])
    assert result.exit_code == 1
