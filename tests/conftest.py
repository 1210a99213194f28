"""Shared pytest fixtures and test helpers for gamestats tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from gamestats.config.settings import GameStatsSettings
from gamestats.infrastructure.library import ContentLibrary

APP_STATE_BODY = """# Clemson vs Appalachian State

Clemson rolled past the Mountaineers behind five touchdown passes.

## Scoring Summary

| Quarter | Clemson | Opponent |
|---------|---------|----------|
| 1st     | 10      | 0        |
| 2nd     | 28      | 6        |
| 3rd     | 21      | 7        |
| 4th     | 7       | 7        |

## Team Stats Comparison

| Stat | Clemson | Opponent |
|------|---------|----------|
| First Downs | 31 | 18 |
| 3rd Down Conv | 5-13 | 4-14 |
| Penalties-Yards | 5-40 | 7-55 |
| Time of Possession | 34:42 | 25:18 |

## Passing

**Clemson**

| Player | Comp-Att | Yards | TD |
|--------|----------|-------|----|
| Cade Klubnik | 24-32 | 378 | 5 |

**Opponent**

| Player | Comp-Att | Yards | TD |
|--------|----------|-------|----|
| Joey Aguilar | 20-38 | 246 | 2 |
"""


def game_text(
    game_date: str,
    opponent: str,
    own: int,
    rival: int,
    *,
    season: int | None = None,
    content_type: str = "statistics",
    game_type: str = "regular_season",
    home_away: str = "home",
    body: str = "## Scoring Summary\n\nRecap goes here.\n",
    extra: str = "",
) -> str:
    """Build a game document with a valid frontmatter block."""
    year = season if season is not None else int(game_date[:4])
    return (
        "---\n"
        f"game_date: '{game_date}'\n"
        f"opponent: {opponent}\n"
        "score:\n"
        f"  clemson: {own}\n"
        f"  opponent: {rival}\n"
        f"season: {year}\n"
        f"game_type: {game_type}\n"
        f"content_type: {content_type}\n"
        f"home_away: {home_away}\n"
        f"{extra}"
        "---\n\n"
        f"{body}"
    )


APP_STATE = game_text(
    "2024-09-07",
    "Appalachian State",
    66,
    20,
    body=APP_STATE_BODY,
    extra="opponent_short: App State\nlocation: Memorial Stadium\nattendance: 81500\n",
)

GAMES: dict[str, str] = {
    "2024-09-07-appalachian-state.md": APP_STATE,
    "2024-11-30-south-carolina.md": game_text("2024-11-30", "South Carolina", 14, 17),
    "2023-11-25-south-carolina.md": game_text(
        "2023-11-25", "South Carolina", 16, 7, home_away="away"
    ),
    "2023-09-04-duke.md": game_text("2023-09-04", "Duke", 7, 28, home_away="away"),
}

EVALUATIONS: dict[str, str] = {
    "2024-09-07-appalachian-state-evaluation.md": game_text(
        "2024-09-07",
        "Appalachian State",
        66,
        20,
        content_type="evaluation",
        body="## Offense\n\nThe passing game was sharp.\n",
        extra="slug: 2024-09-07-appalachian-state-evaluation\n",
    ),
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> GameStatsSettings:
    return GameStatsSettings(content_root=tmp_path)


@pytest.fixture
def library(settings: GameStatsSettings) -> ContentLibrary:
    """Library over in-memory copies of the sample games and evaluations."""
    return ContentLibrary.from_sources(dict(GAMES), dict(EVALUATIONS), settings=settings)


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Temporary content root using the default ``content/games`` layout.

    This is the single source of truth for the on-disk layout. CLI tests
    build on it through ``_isolated_content``.
    """
    games = tmp_path / "content" / "games"
    evaluations = tmp_path / "content" / "evaluations"
    games.mkdir(parents=True)
    evaluations.mkdir(parents=True)
    (tmp_path / "content" / "templates").mkdir()
    for name, text in GAMES.items():
        (games / name).write_text(text, encoding="utf-8")
    for name, text in EVALUATIONS.items():
        (evaluations / name).write_text(text, encoding="utf-8")
    return tmp_path


@pytest.fixture
def _isolated_content(content_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp content root so the CLI reads the sample games.

    Use via ``@pytest.mark.usefixtures("_isolated_content")`` on command
    test classes.
    """
    monkeypatch.delenv("GAMESTATS_CONFIG", raising=False)
    monkeypatch.chdir(content_root)
