"""Command: show one month grid."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from rangepick.commands._base import PickCommand

if TYPE_CHECKING:
    from rangepick.commands._context import AppContext


@click.command(
    cls=PickCommand,
    examples="""\
  rangepick month 2024-03
  rangepick --json month 2024-02""",
)
@click.argument("month_arg", metavar="YYYY-MM", type=click.DateTime(formats=["%Y-%m"]))
@click.pass_obj
def month(app: AppContext, month_arg: datetime) -> None:
    """Render the Sunday-first grid for a month."""
    app.emit(app.picker.month_view(month_arg))
