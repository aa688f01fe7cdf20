"""Command: detect which preset a range matches."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from rangepick.commands._base import PickCommand
from rangepick.domain.types import DateRange

if TYPE_CHECKING:
    from rangepick.commands._context import AppContext


@click.command(
    cls=PickCommand,
    examples="""\
  rangepick --today 2024-06-15 detect 2024-06-09 2024-06-15
  rangepick -q detect 2024-01-01 2024-03-31""",
)
@click.argument("start", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("end", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.pass_obj
def detect(app: AppContext, start: datetime, end: datetime) -> None:
    """Report the preset key matching START..END, or "custom"."""
    app.emit(app.picker.detect(DateRange(start=start, end=end)))
