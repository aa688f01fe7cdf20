"""Shared pytest fixtures and test helpers for rangepick tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rangepick.config.models import PickerConfig
from rangepick.domain.types import DateRange
from rangepick.plugins.hookspecs import hookimpl
from rangepick.plugins.manager import PluginManager
from rangepick.services.picker import PickerService

TODAY = date(2024, 6, 15)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory so no rangepick.toml is discovered."""
    monkeypatch.delenv("RANGEPICK_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def today() -> date:
    return TODAY


class ValueRecorder:
    """Plugin that records every hook call."""

    def __init__(self) -> None:
        self.values: list[DateRange] = []
        self.opened: list[str] = []
        self.closed: list[bool] = []

    @hookimpl
    def value_change(self, value: DateRange) -> None:
        self.values.append(value)

    @hookimpl
    def picker_opened(self, active_field: str) -> None:
        self.opened.append(active_field)

    @hookimpl
    def picker_closed(self, valid: bool) -> None:
        self.closed.append(valid)


@pytest.fixture
def recorder() -> ValueRecorder:
    return ValueRecorder()


@pytest.fixture
def make_picker(recorder: ValueRecorder) -> Callable[..., PickerService]:
    """Factory for pickers wired to the shared recorder.

    Keyword arguments other than ``value``/``scheduler``/``today`` are
    PickerConfig fields.
    """

    def _make(
        *,
        value: DateRange | None = None,
        today: date = TODAY,
        scheduler: Any = None,
        **config: Any,
    ) -> PickerService:
        plugins = PluginManager()
        plugins.register_plugin(recorder, name="recorder")
        return PickerService(
            PickerConfig(**config),
            value=value,
            today=today,
            plugin_manager=plugins,
            scheduler=scheduler,
        )

    return _make
