"""Command group: game listing, lookup and record queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import click

from gamestats.commands._base import GameStatsGroup
from gamestats.services.collection import SORT_FIELDS
from gamestats.services.query import QueryService

if TYPE_CHECKING:
    from gamestats.commands._context import AppContext
    from gamestats.domain.frontmatter import Outcome

_GAME_TYPES = ["regular_season", "bowl", "playoff", "championship"]
_SITES = ["home", "away", "neutral"]

_GAMES_EXAMPLES = """
    gamestats games list --season 2024
    gamestats games show 2024-09-07-appalachian-state
    gamestats games record --season 2024
    gamestats games seasons"""


@click.group(cls=GameStatsGroup, examples=_GAMES_EXAMPLES)
@click.pass_obj
def games(app: AppContext) -> None:
    """List, show, and summarize game documents."""


@games.command(
    name="list",
    examples="""
        gamestats games list
        gamestats games list --season 2024 --site home
        gamestats games list --result loss --sort opponent --order asc
        gamestats games list --type bowl --include-evaluations
        gamestats --json games list --limit 5""",
)
@click.option("--season", type=int, default=None, help="Filter by season year.")
@click.option("--opponent", default=None, help="Filter by exact opponent name.")
@click.option("--type", "game_type", type=click.Choice(_GAME_TYPES), default=None)
@click.option(
    "--content-type",
    type=click.Choice(["statistics", "evaluation"]),
    default=None,
    help="Filter by content type.",
)
@click.option("--site", "home_away", type=click.Choice(_SITES), default=None)
@click.option("--result", type=click.Choice(["win", "loss", "tie"]), default=None)
@click.option("--sort", type=click.Choice(list(SORT_FIELDS)), default="game_date")
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Max results.")
@click.option("--include-evaluations", is_flag=True, help="Also read the evaluations directory.")
@click.option("--validate", is_flag=True, help="Skip documents with invalid frontmatter.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    season: int | None,
    opponent: str | None,
    game_type: str | None,
    content_type: str | None,
    home_away: str | None,
    result: str | None,
    sort: str,
    order: str,
    limit: int | None,
    include_evaluations: bool,
    validate: bool,
) -> None:
    """List games, newest first by default."""
    svc = QueryService(app.library)
    app.emit(
        svc.list_games(
            season=season,
            opponent=opponent,
            game_type=game_type,
            content_type=content_type,
            home_away=home_away,
            result=cast("Outcome | None", result),
            sort=sort,
            order=order,
            include_evaluations=include_evaluations,
            validate=validate,
            limit=limit,
        )
    )


@games.command(
    examples="""
        gamestats games show 2024-09-07-appalachian-state
        gamestats -v games show 2024-09-07-appalachian-state
        gamestats --json games show 2024-11-30-south-carolina --validate"""
)
@click.argument("slug")
@click.option("--include-evaluations", is_flag=True, help="Also search the evaluations directory.")
@click.option("--validate", is_flag=True, help="Fail if the frontmatter is invalid.")
@click.pass_obj
def show(app: AppContext, slug: str, include_evaluations: bool, validate: bool) -> None:
    """Show one game by slug."""
    svc = QueryService(app.library)
    app.emit(svc.get_game(slug, include_evaluations=include_evaluations, validate=validate))


@games.command(
    examples="""
        gamestats games record
        gamestats games record --season 2024
        gamestats games record --opponent "South Carolina"
        gamestats games record --site away --type regular_season"""
)
@click.option("--season", type=int, default=None, help="Filter by season year.")
@click.option("--opponent", default=None, help="Filter by exact opponent name.")
@click.option("--type", "game_type", type=click.Choice(_GAME_TYPES), default=None)
@click.option("--site", "home_away", type=click.Choice(_SITES), default=None)
@click.pass_obj
def record(
    app: AppContext,
    season: int | None,
    opponent: str | None,
    game_type: str | None,
    home_away: str | None,
) -> None:
    """Win/loss record and scoring averages."""
    svc = QueryService(app.library)
    app.emit(
        svc.record(season=season, opponent=opponent, game_type=game_type, home_away=home_away)
    )


@games.command(examples="gamestats games seasons")
@click.pass_obj
def seasons(app: AppContext) -> None:
    """Distinct seasons, newest first."""
    app.emit(QueryService(app.library).seasons())


@games.command(examples="gamestats games opponents")
@click.pass_obj
def opponents(app: AppContext) -> None:
    """Distinct opponents, alphabetically."""
    app.emit(QueryService(app.library).opponents())


@games.command(
    examples="""
        gamestats games slugs
        gamestats -q games slugs --include-evaluations"""
)
@click.option("--include-evaluations", is_flag=True, help="Also read the evaluations directory.")
@click.pass_obj
def slugs(app: AppContext, include_evaluations: bool) -> None:
    """Slugs of every parseable game document."""
    app.emit(QueryService(app.library).slugs(include_evaluations=include_evaluations))
