"""Subcommand modules for rangepick.

Provides register_commands() which uses deferred imports to keep
``rangepick --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from rangepick.commands.detect import detect
    from rangepick.commands.month import month
    from rangepick.commands.presets import presets
    from rangepick.commands.replay import replay

    cli.add_command(presets)
    cli.add_command(detect)
    cli.add_command(month)
    cli.add_command(replay)
