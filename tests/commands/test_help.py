"""Tests for --help and --examples on every command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from gamestats.cli import cli

COMMANDS = [
    ["games"],
    ["games", "list"],
    ["games", "show"],
    ["games", "record"],
    ["games", "seasons"],
    ["games", "opponents"],
    ["games", "slugs"],
    ["tables"],
    ["tables", "list"],
    ["tables", "show"],
    ["tables", "team"],
    ["export"],
    ["export", "game"],
    ["export", "all"],
    ["export", "season"],
    ["check"],
    ["check", "schema"],
    ["check", "template"],
]


@pytest.mark.usefixtures("_isolated_content")
class TestHelp:
    @pytest.mark.parametrize("args", COMMANDS, ids=" ".join)
    def test_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--help"])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    @pytest.mark.parametrize("args", COMMANDS, ids=" ".join)
    def test_examples(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0
        assert "Examples for" in result.output
        assert "gamestats" in result.output

    def test_short_help_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["games", "-h"])
        assert result.exit_code == 0
