"""Rich Console factory and theme for gamestats output.

Consoles render to a StringIO buffer so renderers keep a
``render_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GAMESTATS_THEME = Theme(
    {
        "gs.ok": "bold green",
        "gs.error": "bold red",
        "gs.warning": "bold yellow",
        "gs.op": "bold cyan",
        "gs.key": "dim",
        "gs.slug": "bold blue",
        "gs.path": "dim",
        "gs.title": "bold",
        "gs.result.win": "green",
        "gs.result.loss": "red",
        "gs.result.tie": "yellow",
        "gs.number": "magenta",
    }
)

_RESULT_STYLES: dict[str, str] = {
    "win": "gs.result.win",
    "loss": "gs.result.loss",
    "tie": "gs.result.tie",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=GAMESTATS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_result(outcome: str) -> str:
    """Return the Rich style name for a win/loss/tie outcome."""
    return _RESULT_STYLES.get(outcome, "")
