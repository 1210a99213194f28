"""Command group: content linting (template structure and frontmatter schema)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gamestats.commands._base import GameStatsGroup

if TYPE_CHECKING:
    from gamestats.commands._context import AppContext

_CHECK_EXAMPLES = """
    gamestats check
    gamestats check schema --include-evaluations
    gamestats check template
    gamestats check template --template game-template.md"""


@click.group(cls=GameStatsGroup, examples=_CHECK_EXAMPLES, invoke_without_command=True)
@click.option("--include-evaluations", is_flag=True, help="Also check the evaluations directory.")
@click.pass_context
def check(ctx: click.Context, include_evaluations: bool) -> None:
    """Lint game documents. Without a subcommand, runs every check.

    Exits with code 1 when any error-severity issue is found.
    """
    ctx.meta["check.include_evaluations"] = include_evaluations
    if ctx.invoked_subcommand is not None:
        return
    from gamestats.services.check import CheckService

    app: AppContext = ctx.obj
    app.emit(
        CheckService(app.library).check(include_evaluations=include_evaluations),
        fail_on_errors=True,
    )


@check.command(
    examples="""
        gamestats check schema
        gamestats --json check schema --include-evaluations"""
)
@click.option("--include-evaluations", is_flag=True, help="Also check the evaluations directory.")
@click.pass_context
def schema(ctx: click.Context, include_evaluations: bool) -> None:
    """Validate frontmatter against the content type's schema."""
    app: AppContext = ctx.obj
    include_evaluations = include_evaluations or ctx.meta.get("check.include_evaluations", False)
    from gamestats.services.check import CheckService

    result = CheckService(app.library).check_schema(include_evaluations=include_evaluations)
    app.emit(result, fail_on_errors=True)


@check.command(
    examples="""
        gamestats check template
        gamestats check template --template game-template.md
        gamestats -q check template"""
)
@click.option(
    "--template",
    "template_name",
    default=None,
    help="Reference document in the templates directory (default: the first one).",
)
@click.option("--include-evaluations", is_flag=True, help="Also check the evaluations directory.")
@click.pass_context
def template(ctx: click.Context, template_name: str | None, include_evaluations: bool) -> None:
    """Compare frontmatter fields and section headers with a template."""
    app: AppContext = ctx.obj
    include_evaluations = include_evaluations or ctx.meta.get("check.include_evaluations", False)
    from gamestats.services.check import CheckService

    result = CheckService(app.library).check_template(
        template_name=template_name, include_evaluations=include_evaluations
    )
    app.emit(result, fail_on_errors=True)
