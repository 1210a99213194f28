"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gamestats.output.console import create_console, get_output, style_for_result

if TYPE_CHECKING:
    from rich.console import Console

    from gamestats.services.result import ServiceResult

type Renderer = Callable[..., None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one slug or value per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_item_key(item) for item in items if _item_key(item))

    if result.op in _CHECK_OPS:
        return f"{result.data.get('errors', 0)} errors, {result.data.get('warnings', 0)} warnings"

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _item_key(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("slug", ""))
    return str(item)


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="gs.ok")
    op = Text(f"  {result.op}", style="gs.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gs.key")
    if key == "slug":
        v = Text(str(value), style="gs.slug")
    elif key in ("source", "filename", "output_file", "template"):
        v = Text(str(value), style="gs.path")
    elif key == "result":
        v = Text(str(value), style=style_for_result(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _rows_table(rows: list[dict[str, Any]], *, title: str | None = None) -> Table:
    """Build a Rich Table whose columns are the union of row keys."""
    columns = list(dict.fromkeys(key for row in rows for key in row))
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    for col in columns:
        numeric = all(isinstance(row.get(col), (int, float)) for row in rows if col in row)
        table.add_column(col, justify="right" if numeric else "left")
    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="gs.error")
    op = Text(f"  {result.op}", style="gs.op")
    console.print(label, op, Text(": "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Game renderers ────────────────────────────────────────────────────


def _render_game_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_games as a table with colored results."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date", no_wrap=True)
    table.add_column("Opponent", style="gs.title")
    table.add_column("Score", justify="right")
    table.add_column("Result")
    table.add_column("Season", justify="right")
    table.add_column("Type")
    table.add_column("Site")
    if verbose:
        table.add_column("Slug", style="gs.slug")

    for item in items:
        outcome = str(item.get("result", ""))
        row: list[str | Text] = [
            str(item.get("game_date", "")),
            str(item.get("opponent", "")),
            f"{item.get('own_score', 0)}-{item.get('rival_score', 0)}",
            Text(outcome, style=style_for_result(outcome)),
            _cell(item.get("season")),
            _cell(item.get("game_type")),
            _cell(item.get("home_away")),
        ]
        if verbose:
            row.append(str(item.get("slug", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} games")
    if verbose:
        _render_meta(console, result)


def _render_game(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_game as a panel with metadata and excerpt."""
    d = result.data
    fm: dict[str, Any] = d.get("frontmatter", {})
    score = fm.get("score") if isinstance(fm.get("score"), dict) else {}

    lines: list[str] = []
    for key in ("game_date", "season", "game_type", "content_type", "home_away", "location"):
        val = fm.get(key)
        if val is not None:
            lines.append(f"{key}: {val}")
    if score:
        lines.append(f"score: {score.get('clemson', '?')}-{score.get('opponent', '?')}")
    lines.append(f"result: {d.get('result', '')}")

    tables = d.get("tables", [])
    if tables:
        lines.append(f"tables: {', '.join(tables)}")
    related = d.get("related", [])
    if related:
        lines.append(f"related: {', '.join(related)}")

    content = "\n".join(lines)
    body = d.get("body", "") if verbose else d.get("excerpt") or ""
    if body:
        content += f"\n\n{body.strip()}"

    title = f"{d.get('slug', '?')}: {fm.get('opponent', 'Unknown opponent')}"
    style = style_for_result(str(d.get("result", "")))
    console.print(Panel(Text(content), title=title, border_style=style or "dim", expand=False))


def _render_record(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the win/loss record summary."""
    _status_line(console, result)
    d = result.data
    filters = (result.meta or {}).get("filters") or {}
    for key, value in filters.items():
        _field(console, key, value)
    console.print(
        f"  record: [gs.result.win]{d.get('wins', 0)}[/gs.result.win]-"
        f"[gs.result.loss]{d.get('losses', 0)}[/gs.result.loss]-"
        f"[gs.result.tie]{d.get('ties', 0)}[/gs.result.tie]"
        f"  ({d.get('win_percentage', 0.0):.1f}%)"
    )
    _field(console, "games", d.get("total_games", 0))
    _field(
        console,
        "points",
        f"{d.get('total_points_scored', 0)} scored, {d.get('total_points_allowed', 0)} allowed",
    )
    _field(
        console,
        "average",
        f"{d.get('average_points_scored', 0.0):.1f} scored, "
        f"{d.get('average_points_allowed', 0.0):.1f} allowed",
    )


def _render_value_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render seasons, opponents, slugs and table titles one per line."""
    _status_line(console, result)
    if "slug" in result.data:
        _field(console, "slug", result.data["slug"])
    for item in result.data.get("items", []):
        console.print(Text(f"  {item}"))
    console.print(f"\n{result.data.get('count', 0)} items")


# ── Table renderers ───────────────────────────────────────────────────


def _render_table_rows(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    rows = d.get("rows", [])
    if not rows:
        _status_line(console, result)
        _field(console, "title", d.get("title", ""))
        console.print("  (no rows)")
        return
    console.print(_rows_table(rows, title=str(d.get("title", ""))))
    console.print(f"\n{len(rows)} rows")


def _render_team_tables(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(str(d.get("section", "")), style="bold"))
    for side, label_key in (("own", "own_label"), ("rival", "rival_label")):
        rows = d.get(side, [])
        label = str(d.get(label_key, side))
        if rows:
            console.print(_rows_table(rows, title=label))
        else:
            console.print(f"\n{label}: (no rows)")


# ── Export and check renderers ────────────────────────────────────────


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render an export written to a file."""
    _status_line(console, result)
    d = result.data
    for key in ("slug", "format", "output_file", "filename", "rows"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        for name, value in d.get("headers", {}).items():
            console.print(f"    {name}: {value}")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category, then source."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))
    checked = result.data.get("checked", 0)

    if count == 0:
        console.print(f"[gs.ok]OK[/gs.ok]  No issues found in {checked} documents.")
        return

    severity_styles = {"error": "gs.error", "warning": "gs.warning"}

    by_category: dict[str, dict[str, list[dict[str, Any]]]] = {}
    for issue in issues:
        cat = str(issue.get("category", "unknown"))
        src = str(issue.get("source", ""))
        by_category.setdefault(cat, {}).setdefault(src, []).append(issue)

    for cat, by_source in by_category.items():
        console.print(f"\n[bold]{cat}[/bold]")
        for src, src_issues in by_source.items():
            console.print(Text(f"  {src}", style="gs.path"))
            for issue in src_issues:
                sev = str(issue.get("severity", "warning"))
                style = severity_styles.get(sev, "")
                prefix = f"[{style}]{sev}[/{style}]" if style else sev
                field = issue.get("field")
                where = escape(f" [{field}]") if field else ""
                message = escape(str(issue.get("message", "")))
                console.print(f"    {prefix}{where}: {message}")

    errors = result.data.get("errors", 0)
    warnings = result.data.get("warnings", 0)
    console.print(f"\n{errors} errors, {warnings} warnings in {checked} documents")
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_CHECK_OPS = frozenset({"check", "check_schema", "check_template"})

_OP_RENDERERS: dict[str, Renderer] = {
    # Games
    "list_games": _render_game_table,
    "get_game": _render_game,
    "record": _render_record,
    "seasons": _render_value_list,
    "opponents": _render_value_list,
    "slugs": _render_value_list,
    # Tables
    "list_tables": _render_value_list,
    "get_table": _render_table_rows,
    "get_team_tables": _render_team_tables,
    # Export
    "export": _render_export,
    # Check
    "check": _render_check,
    "check_schema": _render_check,
    "check_template": _render_check,
}
