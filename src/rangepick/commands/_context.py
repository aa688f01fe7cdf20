"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy picker construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rangepick.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rangepick.config.settings import RangepickSettings
    from rangepick.services.picker import PickerService
    from rangepick.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The picker is built on first use so ``--help`` and ``--version`` never
    load plugins.
    """

    def __init__(self, settings: RangepickSettings) -> None:
        self.settings = settings
        self._picker: PickerService | None = None

        from rangepick.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def picker(self) -> PickerService:
        """The picker service (created lazily on first access)."""
        if self._picker is None:
            from rangepick.plugins.manager import PluginManager
            from rangepick.services.picker import PickerService

            plugins = PluginManager()
            plugins.discover_and_load()
            self._picker = PickerService(
                self.settings.picker,
                today=self.settings.today,
                plugin_manager=plugins,
            )
        return self._picker

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
