"""Command group: statistical tables inside a game document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gamestats.commands._base import GameStatsGroup
from gamestats.services.query import QueryService

if TYPE_CHECKING:
    from gamestats.commands._context import AppContext

_TABLES_EXAMPLES = """
    gamestats tables list 2024-09-07-appalachian-state
    gamestats tables show 2024-09-07-appalachian-state "Scoring Summary"
    gamestats tables team 2024-09-07-appalachian-state Passing"""


@click.group(cls=GameStatsGroup, examples=_TABLES_EXAMPLES)
@click.pass_obj
def tables(app: AppContext) -> None:
    """Extract heading-anchored tables from a game."""


@tables.command(
    name="list",
    examples="""
        gamestats tables list 2024-09-07-appalachian-state
        gamestats -q tables list 2024-09-07-appalachian-state""",
)
@click.argument("slug")
@click.pass_obj
def list_cmd(app: AppContext, slug: str) -> None:
    """Titles of every table in the game."""
    app.emit(QueryService(app.library).list_tables(slug))


@tables.command(
    examples="""
        gamestats tables show 2024-09-07-appalachian-state "Scoring Summary"
        gamestats --json tables show 2024-09-07-appalachian-state "Team Stats Comparison\""""
)
@click.argument("slug")
@click.argument("title")
@click.pass_obj
def show(app: AppContext, slug: str, title: str) -> None:
    """Rows of the table under heading TITLE."""
    app.emit(QueryService(app.library).get_table(slug, title))


@tables.command(
    examples="""
        gamestats tables team 2024-09-07-appalachian-state Passing
        gamestats --json tables team 2024-09-07-appalachian-state Rushing"""
)
@click.argument("slug")
@click.argument("section")
@click.pass_obj
def team(app: AppContext, slug: str, section: str) -> None:
    """Per-team tables of SECTION (bold team marker lines)."""
    app.emit(QueryService(app.library).get_team_tables(slug, section))
