"""Heading-anchored markdown table extraction.

Statistical tables in game documents sit under a heading whose text is the
lookup key::

    ### Scoring Summary

    | Quarter | Clemson | Opponent |
    |---------|---------|----------|
    | 1st     | 10      | 0        |

``extract_table(body, "Scoring Summary")`` returns
``[{"quarter": "1st", "clemson": 10, "opponent": 0}]``.

Per-team splits (passing, rushing, ...) put two tables in one section,
each introduced by a bold marker line (``**Clemson**`` / ``**Opponent**``).

Scanning is a line-oriented state machine:

    SEEKING_HEADING -> SEEKING_TABLE -> IN_SEPARATOR -> IN_ROWS -> DONE

INVARIANT: extraction never raises. Malformed markdown yields empty results
so display and export consumers can tolerate missing tables.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto

logger = logging.getLogger(__name__)

type CellValue = int | float | str
type TableRow = dict[str, CellValue]

# Lines examined after a heading when listing table titles (heading line
# included). Kept for compatibility with existing content.
TITLE_LOOKAHEAD = 10

_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_NON_ALNUM_THEN_CHAR = re.compile(r"[^a-z0-9]+(.)")
_COMPOUND_MARKS = ("-", ":", "/")


# ---------------------------------------------------------------------------
# Cell and header normalization
# ---------------------------------------------------------------------------


def split_cells(line: str) -> list[str]:
    """Split a pipe-delimited line into trimmed, non-empty cells."""
    return [cell.strip() for cell in line.split("|")[1:-1] if cell.strip()]


def normalize_header(header: str) -> str:
    """Turn a header cell into a camelCase key.

    Examples:
        >>> normalize_header("First Downs")
        'firstDowns'
        >>> normalize_header("Comp-Att")
        'compAtt'
        >>> normalize_header("**Time of Possession**")
        'timeOfPossession'
    """
    text = header.replace("**", "").replace("*", "").replace("_", "")
    text = _NON_ALNUM_THEN_CHAR.sub(lambda m: m.group(1).upper(), text.lower())
    text = text[:1].lower() + text[1:]
    return text or "value"


def format_number(value: float) -> str:
    """Render a number the way JavaScript's ``Number#toString`` does.

    Integral values drop the fractional part, magnitudes in
    ``[1e-6, 1e21)`` use plain decimal notation, and the rest use an
    exponent with an explicit sign.

    Examples:
        >>> format_number(10.0)
        '10'
        >>> format_number(0.000001)
        '0.000001'
        >>> format_number(1e-8)
        '1e-8'
        >>> format_number(1.5e21)
        '1.5e+21'
    """
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))

    text = repr(number)
    if 1e-6 <= abs(number) < 1e21:
        return format(Decimal(text), "f") if "e" in text else text
    mantissa, _, exponent = text.partition("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def convert_cell(value: str) -> CellValue:
    """Convert a cell to a number when it is a plain numeric literal.

    Cells containing ``-``, ``:`` or ``/`` are compound values (``"5-40"``,
    ``"34:42"``, ``"3/10"``) and stay strings. Otherwise the text must
    round-trip exactly through number -> string, so ``"07"`` and ``"1.50"``
    stay strings too.
    """
    cleaned = value.replace("**", "").replace("*", "").strip()
    if any(mark in cleaned for mark in _COMPOUND_MARKS):
        return cleaned

    try:
        number = float(cleaned)
    except ValueError:
        return cleaned
    if not math.isfinite(number) or format_number(number) != cleaned:
        return cleaned
    return int(number) if number.is_integer() else number


def _build_row(headers: Sequence[str], cells: Sequence[str]) -> TableRow:
    return {normalize_header(h): convert_cell(c) for h, c in zip(headers, cells, strict=True)}


def _heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` when the trimmed *line* is a heading."""
    match = _HEADING.match(line.strip())
    if match is None:
        return None
    return len(match.group(1)), match.group(2).strip()


def _is_table_line(text: str) -> bool:
    return text.startswith("|") and text.endswith("|")


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class ScanState(Enum):
    SEEKING_HEADING = auto()
    SEEKING_TABLE = auto()
    IN_SEPARATOR = auto()
    IN_ROWS = auto()
    DONE = auto()


@dataclass
class TableScanner:
    """Feed lines one at a time; collects the first table it finds.

    Args:
        heading: Heading text to anchor on. ``None`` starts directly in
            ``SEEKING_TABLE``.
        markers: Team labels whose bold marker lines (``**Clemson**``) end
            the scan, used inside per-team sections. Other bold lines such
            as ``**Note:**`` are skipped.
    """

    heading: str | None = None
    markers: tuple[str, ...] = ()
    state: ScanState = ScanState.SEEKING_HEADING
    headers: list[str] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.heading is None:
            self.state = ScanState.SEEKING_TABLE

    @property
    def done(self) -> bool:
        return self.state is ScanState.DONE

    def feed(self, line: str) -> None:
        text = line.strip()
        match self.state:
            case ScanState.SEEKING_HEADING:
                found = _heading(line)
                if found is not None and found[1].lower() == str(self.heading).lower():
                    self.state = ScanState.SEEKING_TABLE
            case ScanState.SEEKING_TABLE:
                if _is_table_line(text):
                    self.headers = split_cells(text)
                    self.state = ScanState.IN_SEPARATOR if self.headers else ScanState.DONE
                elif text.startswith("#") or self._is_marker(text):
                    self.state = ScanState.DONE
            case ScanState.IN_SEPARATOR:
                # Separator contents are not validated.
                self.state = ScanState.IN_ROWS
            case ScanState.IN_ROWS:
                if self._ends_rows(text):
                    self.state = ScanState.DONE
                    return
                cells = split_cells(text)
                if len(cells) == len(self.headers):
                    self.rows.append(_build_row(self.headers, cells))
            case ScanState.DONE:
                pass

    def _ends_rows(self, text: str) -> bool:
        return not text or text.startswith("#") or not text.startswith("|")

    def _is_marker(self, text: str) -> bool:
        if not text.startswith("**"):
            return False
        lowered = text.lower()
        return any(f"**{label}**".lower() in lowered for label in self.markers)

    def scan(self, lines: Sequence[str]) -> list[TableRow]:
        for line in lines:
            self.feed(line)
            if self.done:
                break
        return self.rows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TeamTables:
    """Per-team tables from one section."""

    own: list[TableRow] = field(default_factory=list)
    rival: list[TableRow] = field(default_factory=list)


def extract_table(body: str, heading_title: str) -> list[TableRow]:
    """Extract the first table under the heading *heading_title*.

    Returns an empty list when the heading or table is missing.
    """
    try:
        return TableScanner(heading=heading_title).scan(body.split("\n"))
    except Exception:
        logger.warning("Error parsing table %r", heading_title, exc_info=True)
        return []


def _section_bounds(lines: Sequence[str], title: str) -> tuple[int, int] | None:
    """Locate the section headed *title*; deeper headings stay inside it."""
    start: int | None = None
    level = 0
    for idx, line in enumerate(lines):
        found = _heading(line)
        if found is None:
            continue
        if start is None:
            if found[1].lower() == title.lower():
                start, level = idx, found[0]
        elif found[0] <= level:
            return start, idx
    if start is None:
        return None
    return start, len(lines)


def _marker_index(lines: Sequence[str], label: str) -> int | None:
    marker = f"**{label}**".lower()
    for idx, line in enumerate(lines):
        if marker in line.lower():
            return idx
    return None


def extract_team_section(
    body: str,
    section_title: str,
    *,
    own_label: str = "Clemson",
    rival_label: str = "Opponent",
) -> TeamTables:
    """Extract the own/rival tables from a per-team section.

    Each bold marker line starts an independent table scan bounded by the
    section. Marker order does not matter; a missing marker yields an empty
    list for that side.
    """
    try:
        lines = body.split("\n")
        bounds = _section_bounds(lines, section_title)
        if bounds is None:
            return TeamTables()
        section = lines[bounds[0] : bounds[1]]

        sides: list[list[TableRow]] = []
        for label in (own_label, rival_label):
            idx = _marker_index(section, label)
            if idx is None:
                sides.append([])
                continue
            scanner = TableScanner(markers=(own_label, rival_label))
            sides.append(scanner.scan(section[idx + 1 :]))
        return TeamTables(own=sides[0], rival=sides[1])
    except Exception:
        logger.warning("Error parsing team section %r", section_title, exc_info=True)
        return TeamTables()


def list_table_titles(body: str) -> list[str]:
    """Return every heading followed closely by a table, in document order.

    A table counts when a pipe line appears before the next heading within
    :data:`TITLE_LOOKAHEAD` lines. Titles are not deduplicated.
    """
    try:
        lines = body.split("\n")
        titles: list[str] = []
        for idx, line in enumerate(lines):
            found = _heading(line)
            if found is None:
                continue
            for nxt in lines[idx + 1 : min(idx + TITLE_LOOKAHEAD, len(lines))]:
                text = nxt.strip()
                if _is_table_line(text):
                    titles.append(found[1])
                    break
                if text.startswith("#"):
                    break
        return titles
    except Exception:
        logger.warning("Error listing table titles", exc_info=True)
        return []


def extract_tables(body: str) -> dict[str, list[TableRow]]:
    """Extract every titled table as ``{title: rows}``.

    Repeated titles keep the first table, matching :func:`extract_table`.
    """
    tables: dict[str, list[TableRow]] = {}
    for title in list_table_titles(body):
        if title not in tables:
            tables[title] = extract_table(body, title)
    return tables
