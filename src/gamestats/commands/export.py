"""Command group: CSV export of games, all games, or one season."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from gamestats.commands._base import GameStatsGroup
from gamestats.services.export import EXPORT_FORMATS, ExportService
from gamestats.services.result import ServiceResult

if TYPE_CHECKING:
    from gamestats.commands._context import AppContext

_EXPORT_EXAMPLES = """
    gamestats export game 2024-09-07-appalachian-state
    gamestats export game 2024-09-07-appalachian-state --format tables-csv --output tables.csv
    gamestats export all --output all-games.csv
    gamestats export season 2024 --output ./exports/"""

_output_option = click.option(
    "--output",
    "output",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file, or a directory to use the default file name (omit for stdout).",
)


@click.group(cls=GameStatsGroup, examples=_EXPORT_EXAMPLES)
@click.pass_obj
def export(app: AppContext) -> None:
    """Export game data as CSV."""


def _deliver(app: AppContext, result: ServiceResult, output: Path | None) -> None:
    """Write the CSV payload to *output*, or stream it to stdout."""
    if not result.ok:
        app.emit(result)
        return

    content = str(result.data["content"])
    if output is None:
        # Pipe-friendly: raw CSV to stdout.
        click.echo(content, nl=False)
        return

    target = output / str(result.data["filename"]) if output.is_dir() else output
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)

    summary = {k: v for k, v in result.data.items() if k not in ("content", "mime_type")}
    app.emit(
        ServiceResult(
            ok=True,
            op="export",
            data={**summary, "output_file": str(target)},
            warnings=result.warnings,
        )
    )


@export.command(
    examples="""
        gamestats export game 2024-09-07-appalachian-state
        gamestats export game 2024-09-07-appalachian-state --format metadata-csv
        gamestats export game 2024-09-07-appalachian-state --format tables-csv --output out/"""
)
@click.argument("slug")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(EXPORT_FORMATS)),
    default="csv",
    help="csv: metadata and tables; metadata-csv or tables-csv: one part only.",
)
@_output_option
@click.pass_obj
def game(app: AppContext, slug: str, fmt: str, output: Path | None) -> None:
    """Export one game by slug."""
    result = ExportService(app.library).export(slug=slug, fmt=fmt, scope="single")
    _deliver(app, result, output)


@export.command(
    name="all",
    examples="""
        gamestats export all
        gamestats export all --output all-games.csv""",
)
@_output_option
@click.pass_obj
def all_games(app: AppContext, output: Path | None) -> None:
    """Export metadata rows for every game."""
    result = ExportService(app.library).export(scope="all", fmt="metadata-csv")
    _deliver(app, result, output)


@export.command(
    examples="""
        gamestats export season 2024
        gamestats export season 2023 --output ./exports/"""
)
@click.argument("season")
@_output_option
@click.pass_obj
def season(app: AppContext, season: str, output: Path | None) -> None:
    """Export metadata rows for one season."""
    result = ExportService(app.library).export(scope="season", fmt="metadata-csv", season=season)
    _deliver(app, result, output)
