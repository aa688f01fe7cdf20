"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from datetime import date
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rangepick.domain.dates import WEEKDAY_LABELS, build_month_grid, month_label
from rangepick.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from rangepick.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "presets":
        return "\n".join(str(item["key"]) for item in result.data.get("items", []))
    if result.op == "detect":
        return str(result.data.get("preset") or "none")
    if "range" in result.data:
        return _range_text(result.data["range"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _range_text(range_data: dict[str, Any]) -> str:
    """``start end`` with ``-`` for a missing endpoint."""
    return f"{range_data.get('start') or '-'} {range_data.get('end') or '-'}"


def _parse_day(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="pick.ok")
    op = Text(f"  {result.op}", style="pick.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pick.key")
    if key in ("preset", "active_preset") and value:
        v = Text(str(value), style="pick.preset")
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _month_table(
    anchor: date,
    *,
    start: date | None = None,
    end: date | None = None,
    today: date | None = None,
) -> Table:
    """Build a Sunday-first calendar table for *anchor*'s month."""
    table = Table(title=month_label(anchor), show_header=True, pad_edge=False, expand=False)
    for label in WEEKDAY_LABELS:
        table.add_column(label, justify="right", no_wrap=True)

    low, high = start, end
    if low is not None and high is not None and low > high:
        low, high = high, low

    cells = build_month_grid(anchor)
    for week in range(0, len(cells), 7):
        row: list[Text] = []
        for cell in cells[week : week + 7]:
            if cell is None:
                row.append(Text(""))
                continue
            style = ""
            if cell in (start, end):
                style = "pick.day.edge"
            elif low is not None and high is not None and low <= cell <= high:
                style = "pick.day.range"
            elif cell == today:
                style = "pick.day.today"
            row.append(Text(str(cell.day), style=style))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pick.error")
    op = Text(f"  {result.op}", style="pick.op")
    sep = Text("-")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_presets(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the preset catalog as a table."""
    _status_line(console, result)
    _field(console, "today", result.data.get("today"))
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="pick.preset", no_wrap=True)
    table.add_column("Label")
    table.add_column("Start", no_wrap=True)
    table.add_column("End", no_wrap=True)
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("key", "")),
            str(item.get("label", "")),
            str(item.get("start", "")),
            str(item.get("end", "")),
        )
    console.print(table)


def _render_detect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "range", _range_text(result.data.get("range", {})))
    _field(console, "preset", result.data.get("preset") or "none")


def _render_month(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single month grid."""
    anchor = _parse_day(result.data.get("month"))
    if anchor is None:
        _render_generic(result, console, verbose=verbose)
        return
    console.print(_month_table(anchor, today=_parse_day(result.data.get("today"))))
    if verbose:
        years = result.data.get("years", [])
        if years:
            _field(console, "years", f"{years[0]}..{years[-1]}")


# ── Picker state renderer ─────────────────────────────────────────────


def _render_picker(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render picker state: fields, validation messages, both calendars."""
    d = result.data
    _status_line(console, result)
    range_data = d.get("range", {})
    _field(console, "range", _range_text(range_data))
    for key in ("active_field", "active_preset", "is_open", "show_validation_error"):
        if key in d:
            _field(console, key, d[key])
    if "actions" in d:
        _field(console, "actions", d["actions"])

    for text in (d.get("messages") or {}).values():
        if text:
            console.print(Text(f"  {text}", style="pick.message"))

    top = _parse_day(d.get("top_month"))
    bottom = _parse_day(d.get("bottom_month"))
    if top is None or bottom is None:
        return
    start = _parse_day(range_data.get("start"))
    end = _parse_day(range_data.get("end"))
    today = _parse_day(d.get("today"))
    console.print()
    console.print(_month_table(top, start=start, end=end, today=today))
    console.print(_month_table(bottom, start=start, end=end, today=today))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Catalog
    "presets": _render_presets,
    "detect": _render_detect,
    "month": _render_month,
    # Picker
    "replay": _render_picker,
    "open": _render_picker,
    "close": _render_picker,
    "finalize_close": _render_picker,
    "outside_interaction": _render_picker,
    "clear": _render_picker,
    "select_preset": _render_picker,
    "pick_date": _render_picker,
    "set_value": _render_picker,
    "navigate": _render_picker,
}
