"""Subcommand modules for gamestats.

Provides register_commands() which uses deferred imports to keep
``gamestats --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from gamestats.commands.check import check
    from gamestats.commands.export import export
    from gamestats.commands.games import games
    from gamestats.commands.tables import tables

    cli.add_command(games)
    cli.add_command(tables)
    cli.add_command(export)
    cli.add_command(check)
