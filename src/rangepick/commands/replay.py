"""Command: drive a picker through a sequence of user actions."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import click

from rangepick.commands._base import PickCommand
from rangepick.domain.types import DateRange
from rangepick.services.result import ServiceResult

if TYPE_CHECKING:
    from rangepick.commands._context import AppContext
    from rangepick.services.picker import PickerService

_ACTIONS_HELP = """\
Actions:

\b
  open | open:start | open:end     open the panel (optionally on a field)
  close | outside                  close, then run the deferred validation
  clear                            empty the range
  pick:YYYY-MM-DD                  click a day
  preset:KEY                       apply a quick preset
  prev:SIDE | next:SIDE            move the top/bottom calendar one month
  month:SIDE:M                     show month M (1-12) on a calendar
  year:SIDE:YYYY                   show year YYYY on a calendar
  value:START:END                  apply an owner update (- for missing)
"""


def _day(text: str) -> date | None:
    if text == "-":
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        msg = f"Invalid date {text!r} (expected YYYY-MM-DD)"
        raise click.BadParameter(msg, param_hint="ACTIONS") from None


def _int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        msg = f"Expected a number, got {text!r}"
        raise click.BadParameter(msg, param_hint="ACTIONS") from None


def _apply(picker: PickerService, action: str) -> ServiceResult:
    """Run one action string against *picker*."""
    name, _, rest = action.partition(":")
    args = rest.split(":") if rest else []

    if name == "open" and len(args) <= 1:
        return picker.open(args[0] if args else None)
    if name in ("close", "outside") and not args:
        result = picker.close() if name == "close" else picker.outside_interaction()
        if result.ok and picker.close_pending:
            return picker.finalize_close()
        return result
    if name == "clear" and not args:
        return picker.clear()
    if name == "pick" and len(args) == 1:
        day = _day(args[0])
        if day is None:
            raise click.BadParameter("pick needs a date", param_hint="ACTIONS")
        return picker.pick_date(day)
    if name == "preset" and len(args) == 1:
        return picker.select_preset(args[0])
    if name == "prev" and len(args) == 1:
        return picker.prev_month(args[0])
    if name == "next" and len(args) == 1:
        return picker.next_month(args[0])
    if name == "month" and len(args) == 2:
        return picker.set_month_index(args[0], _int(args[1]) - 1)
    if name == "year" and len(args) == 2:
        return picker.set_year(args[0], _int(args[1]))
    if name == "value" and len(args) == 2:
        return picker.set_value(DateRange(start=_day(args[0]), end=_day(args[1])))

    msg = f"Unknown action {action!r}"
    raise click.BadParameter(msg, param_hint="ACTIONS")


@click.command(
    cls=PickCommand,
    epilog=_ACTIONS_HELP,
    examples="""\
  rangepick --today 2024-03-01 replay open pick:2024-03-10 pick:2024-03-20
  rangepick --mode dependent replay preset:last30 open:start pick:2024-01-05
  rangepick --json replay open next:top month:bottom:12 close""",
)
@click.argument("actions", nargs=-1, required=True)
@click.pass_obj
def replay(app: AppContext, actions: tuple[str, ...]) -> None:
    """Apply ACTIONS in order and show the final picker state."""
    picker = app.picker
    warnings: list[str] = []
    for action in actions:
        result = _apply(picker, action)
        if not result.ok:
            app.emit(result)
            return
        warnings.extend(result.warnings)

    app.emit(
        ServiceResult(
            ok=True,
            op="replay",
            data={**picker.snapshot(), "actions": len(actions)},
            warnings=warnings,
        )
    )
