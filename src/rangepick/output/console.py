"""Rich Console factory and theme for rangepick output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PICK_THEME = Theme(
    {
        "pick.ok": "bold green",
        "pick.error": "bold red",
        "pick.warning": "bold yellow",
        "pick.op": "bold cyan",
        "pick.key": "dim",
        "pick.preset": "bold magenta",
        "pick.message": "red",
        "pick.day.edge": "bold reverse",
        "pick.day.range": "on grey23",
        "pick.day.today": "underline",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PICK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 100,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
