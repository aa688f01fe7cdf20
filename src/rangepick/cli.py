"""Root CLI group for rangepick with global flags and command registration."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import click

from rangepick import __version__
from rangepick.commands import register_commands
from rangepick.commands._context import AppContext
from rangepick.config.settings import RangepickSettings
from rangepick.domain.types import SelectionMode


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rangepick")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference day for presets (default: the current day).",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in SelectionMode]),
    default=None,
    help="Selection mode.",
)
@click.option(
    "--last-year/--no-last-year",
    "include_last_year_preset",
    default=None,
    help="Include the 'Last year' preset.",
)
@click.option(
    "--auto-close/--no-auto-close",
    "auto_close_on_preset_select",
    default=None,
    help="Close the panel after a preset is selected.",
)
@click.option(
    "--editing/--no-editing",
    "editing_after_complete",
    default=None,
    help="Edit the active field after the range is complete.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    today: datetime | None,
    mode: str | None,
    include_last_year_preset: bool | None,
    auto_close_on_preset_select: bool | None,
    editing_after_complete: bool | None,
) -> None:
    """rangepick — date range picker state machine."""
    ctx.ensure_object(dict)
    overrides: dict[str, Any] = {
        key: value
        for key, value in (
            ("mode", mode),
            ("include_last_year_preset", include_last_year_preset),
            ("auto_close_on_preset_select", auto_close_on_preset_select),
            ("editing_after_complete", editing_after_complete),
        )
        if value is not None
    }
    flags: dict[str, Any] = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
    }
    if today is not None:
        flags["today"] = today.date()
    settings = RangepickSettings.from_cli(
        config_path=config_path,
        picker_overrides=overrides,
        **flags,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
