"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Provides lazy library construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gamestats.config.logging import configure_logging
from gamestats.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gamestats.config.settings import GameStatsSettings
    from gamestats.infrastructure.library import ContentLibrary
    from gamestats.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The library is built on first use so ``--help`` and ``--version`` never
    touch the content directories.
    """

    def __init__(self, settings: GameStatsSettings) -> None:
        self.settings = settings
        self._library: ContentLibrary | None = None
        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    @property
    def library(self) -> ContentLibrary:
        """The content library (created lazily on first access)."""
        if self._library is None:
            from gamestats.infrastructure.library import ContentLibrary

            self._library = ContentLibrary(self.settings)
        return self._library

    def emit(self, result: ServiceResult, *, fail_on_errors: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        * ``fail_on_errors``: successful check results that found
          error-severity issues also exit with code 1.
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
            if fail_on_errors and result.data.get("errors", 0):
                raise SystemExit(1)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
