"""Tests for the check command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from gamestats.cli import cli
from tests.conftest import game_text

TEMPLATE = game_text("2024-01-01", "Template", 0, 0, body="## Scoring Summary\n")


@pytest.mark.usefixtures("_isolated_content")
class TestCheckCommands:
    def test_check_all_clean_exit_zero(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0

    def test_schema(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "schema"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["op"] == "check_schema"
        assert data["data"]["checked"] == 4

    def test_schema_errors_exit_one(self, cli_runner: CliRunner, content_root: Path) -> None:
        old = game_text("1890-10-01", "Furman", 0, 0, season=1890)
        (content_root / "content" / "games" / "1890-10-01-furman.md").write_text(old)
        result = cli_runner.invoke(cli, ["check", "schema"])
        assert result.exit_code == 1
        assert "1896" in result.output

    def test_template_from_directory(self, cli_runner: CliRunner, content_root: Path) -> None:
        (content_root / "content" / "templates" / "game-template.md").write_text(TEMPLATE)
        result = cli_runner.invoke(cli, ["--json", "check", "template"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["errors"] == 0
        assert data["data"]["checked"] == 4

    def test_template_missing_header(self, cli_runner: CliRunner, content_root: Path) -> None:
        (content_root / "content" / "templates" / "t.md").write_text(
            game_text("2024-01-01", "Template", 0, 0, body="## Scoring Summary\n## Rushing\n")
        )
        result = cli_runner.invoke(cli, ["-q", "check", "template", "--template", "t.md"])
        assert result.exit_code == 1
        assert "errors" in result.output

    def test_unknown_template(self, cli_runner: CliRunner, content_root: Path) -> None:
        (content_root / "content" / "templates" / "t.md").write_text(TEMPLATE)
        result = cli_runner.invoke(cli, ["check", "template", "--template", "nope.md"])
        assert result.exit_code == 1
        assert "Template file not found: nope.md" in result.output

    def test_group_flag_reaches_subcommand(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "--include-evaluations", "schema"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["checked"] == 5

    def test_undecodable_file_reported(self, cli_runner: CliRunner, content_root: Path) -> None:
        (content_root / "content" / "games" / "2024-10-05-bad.md").write_bytes(b"\xff")
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Failed to read file" in result.output
