"""Tests for the replay command."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from rangepick.cli import cli

TODAY = ["--today", "2024-06-15"]


def _replay(runner: CliRunner, *args: str, options: tuple[str, ...] = ()) -> Any:
    return runner.invoke(cli, [*TODAY, "--json", *options, "replay", *args])


@pytest.mark.usefixtures("_isolated_cwd")
class TestReplay:
    def test_pick_two_days(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "open", "pick:2024-03-10", "pick:2024-03-20")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["range"] == {"start": "2024-03-10", "end": "2024-03-20"}
        assert data["active_preset"] == "custom"
        assert data["actions"] == 3

    def test_close_runs_validation(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "open", "pick:2024-03-05", "close")
        data = json.loads(result.stdout)["data"]
        assert data["is_open"] is False
        assert data["close_pending"] is False
        assert data["show_validation_error"] is True
        assert data["messages"]["end"] == "Please select an end date."

    def test_outside_click(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "open", "outside")
        data = json.loads(result.stdout)["data"]
        assert data["messages"]["general"] == "Please select a start and end date."

    def test_preset_with_auto_close(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "open", "preset:last7", options=("--auto-close",))
        data = json.loads(result.stdout)["data"]
        assert data["range"] == {"start": "2024-06-09", "end": "2024-06-15"}
        assert data["is_open"] is False

    def test_dependent_navigation(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "open", "month:bottom:1", options=("--mode", "dependent"))
        data = json.loads(result.stdout)["data"]
        assert data["top_month"] == "2023-12-01"
        assert data["bottom_month"] == "2024-01-01"

    def test_year_and_next(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "year:top:2030", "next:bottom", "prev:top")
        data = json.loads(result.stdout)["data"]
        assert data["top_month"] == "2030-05-01"
        assert data["bottom_month"] == "2024-08-01"

    def test_owner_value(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "value:2024-06-09:2024-06-15", "open")
        data = json.loads(result.stdout)["data"]
        assert data["active_preset"] == "last7"

    def test_clear(self, cli_runner: CliRunner) -> None:
        result = _replay(cli_runner, "preset:thisYear", "clear")
        data = json.loads(result.stdout)["data"]
        assert data["range"] == {"start": None, "end": None}
        assert data["show_validation_error"] is True

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, [*TODAY, "-q", "replay", "open", "pick:2024-03-10", "pick:2024-03-20"]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "2024-03-10 2024-03-20"

    def test_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*TODAY, "replay", "open", "pick:2024-06-10"])
        assert result.exit_code == 0, result.output
        assert "replay" in result.output
        assert "June 2024" in result.output

    def test_operation_failure_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*TODAY, "replay", "open", "preset:lastYear"])
        assert result.exit_code == 1
        assert "Unknown preset: lastYear" in result.output

    def test_invalid_side_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*TODAY, "replay", "next:left"])
        assert result.exit_code == 1

    @pytest.mark.parametrize(
        "action",
        ["jump", "pick", "pick:soon", "pick:-", "month:top:x", "open:start:end"],
    )
    def test_bad_action_syntax(self, cli_runner: CliRunner, action: str) -> None:
        result = cli_runner.invoke(cli, [*TODAY, "replay", action])
        assert result.exit_code == 2

    def test_requires_actions(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["replay"])
        assert result.exit_code == 2
