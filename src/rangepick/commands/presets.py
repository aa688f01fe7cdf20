"""Command: list quick presets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rangepick.commands._base import PickCommand

if TYPE_CHECKING:
    from rangepick.commands._context import AppContext


@click.command(
    cls=PickCommand,
    examples="""\
  rangepick presets
  rangepick --today 2024-06-15 presets
  rangepick --json --last-year presets""",
)
@click.pass_obj
def presets(app: AppContext) -> None:
    """List the quick presets with their ranges for today."""
    app.emit(app.picker.describe_presets())
