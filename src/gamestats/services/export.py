"""CSV export: metadata rows, raw table blocks and download payloads.

Serialization helpers are plain functions; :class:`ExportService` wraps them
into the export surface (``slug``, ``format``, ``scope``, ``season``) and
reports failures as :class:`ServiceResult` errors with an HTTP-style
``status`` in the error detail.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from gamestats.domain.content import ParsedDocument
from gamestats.domain.frontmatter import result_letter
from gamestats.domain.tables import extract_table, format_number
from gamestats.services.base import BaseService
from gamestats.services.collection import GameFilters
from gamestats.services.result import ServiceResult

logger = logging.getLogger(__name__)

ExportFormat = Literal["csv", "metadata-csv", "tables-csv"]
ExportScope = Literal["single", "all", "season"]

EXPORT_FORMATS: tuple[str, ...] = ("csv", "metadata-csv", "tables-csv")
EXPORT_SCOPES: tuple[str, ...] = ("single", "all", "season")

CSV_BOM = "\ufeff"
CSV_MIME_TYPE = "text/csv;charset=utf-8;"

METADATA_COLUMNS: tuple[str, ...] = (
    "slug",
    "game_date",
    "opponent",
    "opponent_short",
    "clemson_score",
    "opponent_score",
    "result",
    "season",
    "game_type",
    "content_type",
    "home_away",
    "location",
    "attendance",
    "weather",
    "win_streak",
)

_SEPARATOR_ROW = re.compile(r"^\|[\s\-:|]+\|$")


@dataclass(frozen=True)
class CsvOptions:
    include_headers: bool = True
    delimiter: str = ","
    quote: str = '"'
    line_ending: str = "\n"
    flatten_nested: bool = True


# ---------------------------------------------------------------------------
# Values and rows
# ---------------------------------------------------------------------------


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def escape_value(value: Any, delimiter: str = ",", quote: str = '"') -> str:
    """Render one CSV cell.

    ``None`` becomes an empty cell. Text is quoted (inner quotes doubled)
    only when it contains the delimiter, the quote character, or a line
    break.

    Examples:
        >>> escape_value("a,b")
        '"a,b"'
        >>> escape_value('he said "hi"')
        '"he said ""hi""\"'
        >>> escape_value(None)
        ''
    """
    if value is None:
        return ""
    text = _to_text(value)
    if delimiter in text or quote in text or "\n" in text or "\r" in text:
        return quote + text.replace(quote, quote + quote) + quote
    return text


def flatten(obj: Mapping[str, Any], prefix: str = "", separator: str = ".") -> dict[str, Any]:
    """Inline nested mappings into *separator*-joined keys.

    Lists are not recursed into; they are serialized whole as compact JSON.
    Dates and other scalars are kept as they are.

    Examples:
        >>> flatten({"score": {"clemson": 1, "opponent": 2}, "tags": ["a", "b"]})
        {'score.clemson': 1, 'score.opponent': 2, 'tags': '["a","b"]'}
    """
    result: dict[str, Any] = {}
    for key, value in obj.items():
        new_key = f"{prefix}{separator}{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            result.update(flatten(value, new_key, separator))
        elif isinstance(value, (list, tuple)):
            result[new_key] = json.dumps(
                list(value), separators=(",", ":"), ensure_ascii=False, default=str
            )
        else:
            result[new_key] = value
    return result


def rows_to_csv(rows: Sequence[Mapping[str, Any]], options: CsvOptions | None = None) -> str:
    """Serialize *rows*; the header is the union of keys in first-seen order.

    Missing keys give empty cells. No rows gives ``""``, not a bare header.
    """
    opts = options or CsvOptions()
    if not rows:
        return ""

    processed = [flatten(row) if opts.flatten_nested else dict(row) for row in rows]
    keys = list(dict.fromkeys(key for row in processed for key in row))

    lines: list[str] = []
    if opts.include_headers:
        lines.append(opts.delimiter.join(escape_value(k, opts.delimiter, opts.quote) for k in keys))
    for row in processed:
        lines.append(
            opts.delimiter.join(escape_value(row.get(k), opts.delimiter, opts.quote) for k in keys)
        )
    return opts.line_ending.join(lines)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _or_blank(value: Any) -> Any:
    return "" if value is None else value


def metadata_row(doc: ParsedDocument) -> dict[str, Any]:
    """Project *doc* onto :data:`METADATA_COLUMNS`."""
    fm = doc.frontmatter
    own, rival = doc.score
    return {
        "slug": doc.slug,
        "game_date": doc.game_date,
        "opponent": doc.opponent,
        "opponent_short": _or_blank(fm.get("opponent_short")),
        "clemson_score": own,
        "opponent_score": rival,
        "result": result_letter(own, rival),
        "season": _or_blank(fm.get("season")),
        "game_type": _or_blank(fm.get("game_type")),
        "content_type": _or_blank(fm.get("content_type")),
        "home_away": _or_blank(fm.get("home_away")),
        "location": _or_blank(fm.get("location")),
        "attendance": _or_blank(fm.get("attendance")),
        "weather": _or_blank(fm.get("weather")),
        "win_streak": _or_blank(fm.get("win_streak")),
    }


def metadata_to_csv(
    docs: ParsedDocument | Sequence[ParsedDocument],
    options: CsvOptions | None = None,
) -> str:
    """One metadata row per document."""
    items = [docs] if isinstance(docs, ParsedDocument) else list(docs)
    return rows_to_csv([metadata_row(doc) for doc in items], options)


def tables_from_body(raw_body: str) -> list[str]:
    """Every contiguous pipe-table block of *raw_body* as CSV text.

    Heading context is ignored. Separator rows are dropped and a block ends
    at the first line that is not a table row.
    """
    tables: list[str] = []
    current: list[str] = []

    for line in raw_body.split("\n"):
        text = line.strip()
        if text.startswith("|"):
            if _SEPARATOR_ROW.match(text):
                continue
            cells = [cell.strip() for cell in text.split("|")[1:-1]]
            current.append(",".join(escape_value(cell) for cell in cells))
        elif current:
            tables.append("\n".join(current))
            current = []

    if current:
        tables.append("\n".join(current))
    return tables


def table_to_csv(body: str, title: str, options: CsvOptions | None = None) -> str:
    """The table under heading *title*, with typed cells, as CSV."""
    return rows_to_csv(extract_table(body, title), options)


@dataclass(frozen=True)
class DocumentCsv:
    metadata: str
    tables: list[str] = field(default_factory=list)

    def combined(self) -> str:
        """Metadata and tables in one file, each under a comment header."""
        tables = "\n\n".join(self.tables)
        return f"# Game Metadata\n{self.metadata}\n\n# Game Statistics Tables\n{tables}"


def document_to_csv(doc: ParsedDocument, options: CsvOptions | None = None) -> DocumentCsv:
    return DocumentCsv(metadata=metadata_to_csv(doc, options), tables=tables_from_body(doc.raw_body))


def collection_to_csv(docs: Sequence[ParsedDocument], options: CsvOptions | None = None) -> str:
    """Metadata-only CSV, one row per document."""
    return metadata_to_csv(list(docs), options)


@dataclass(frozen=True)
class CsvDownload:
    content: str
    filename: str
    mime_type: str
    headers: dict[str, str]


def build_download(content: str, filename: str = "export.csv") -> CsvDownload:
    """Wrap *content* for download: BOM prefix plus response headers."""
    return CsvDownload(
        content=CSV_BOM + content,
        filename=filename,
        mime_type=CSV_MIME_TYPE,
        headers={
            "Content-Type": "text/csv;charset=utf-8",
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ExportService(BaseService):
    """CSV exports of one game, all games, or one season."""

    def _csv_options(self) -> CsvOptions:
        cfg = self._library.settings.export
        return CsvOptions(
            include_headers=cfg.include_headers,
            delimiter=cfg.delimiter,
            line_ending=cfg.line_ending,
        )

    def export(
        self,
        *,
        slug: str | None = None,
        fmt: str = "csv",
        scope: str = "single",
        season: int | str | None = None,
    ) -> ServiceResult:
        """Build a CSV download.

        ``single`` needs *slug* and honours *fmt*; ``all`` and ``season``
        always export metadata rows.
        """
        op = "export"
        if fmt not in EXPORT_FORMATS:
            return ServiceResult.failure(
                op,
                "INVALID_FORMAT",
                f"Invalid format. Supported formats: {', '.join(EXPORT_FORMATS)}",
                status=400,
            )
        if scope not in EXPORT_SCOPES:
            return ServiceResult.failure(
                op,
                "INVALID_TYPE",
                f"Invalid type. Supported types: {', '.join(EXPORT_SCOPES)}",
                status=400,
            )

        try:
            match scope:
                case "single":
                    return self._export_single(slug, fmt)
                case "all":
                    return self._export_all()
                case _:
                    return self._export_season(season)
        except Exception as exc:
            logger.exception("Error exporting %s", slug or scope)
            return ServiceResult.failure(
                op, "EXPORT_FAILED", "Failed to export data", status=500, reason=str(exc)
            )

    def _export_single(self, slug: str | None, fmt: str) -> ServiceResult:
        op = "export"
        if not slug:
            return ServiceResult.failure(
                op, "MISSING_PARAMETER", "Missing required parameter: slug", status=400
            )

        doc = self._library.collection.get_by_slug(slug, validate=False)
        if doc is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"Game not found: {slug}", status=404)

        options = self._csv_options()
        if fmt == "metadata-csv":
            content = metadata_to_csv(doc, options)
            filename = f"{slug}-metadata.csv"
        else:
            exported = document_to_csv(doc, options)
            if fmt == "tables-csv":
                if not exported.tables:
                    return ServiceResult.failure(
                        op, "NO_TABLES", "No tables found in game content", status=404
                    )
                content = "\n\n".join(exported.tables)
                filename = f"{slug}-tables.csv"
            else:
                content = exported.combined()
                filename = f"{slug}.csv"

        return self._download_result(build_download(content, filename), fmt=fmt, rows=1, slug=slug)

    def _export_all(self) -> ServiceResult:
        result = self._library.collection.load(validate=False)
        if not result.documents:
            return ServiceResult.failure("export", "NOT_FOUND", "No games found", status=404)
        content = collection_to_csv(result.documents, self._csv_options())
        return self._download_result(
            build_download(content, "all-games.csv"),
            fmt="metadata-csv",
            rows=len(result.documents),
            warnings=self._failure_warnings(result),
        )

    def _export_season(self, season: int | str | None) -> ServiceResult:
        op = "export"
        if season is None or season == "":
            return ServiceResult.failure(
                op, "MISSING_PARAMETER", "Missing required parameter: season", status=400
            )
        try:
            year = int(season)
        except (TypeError, ValueError):
            return ServiceResult.failure(
                op, "INVALID_SEASON", "Invalid season year. Must be a number.", status=400
            )

        result = self._library.collection.load(validate=False, filters=GameFilters(season=year))
        if not result.documents:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No games found for season {year}", status=404
            )
        content = collection_to_csv(result.documents, self._csv_options())
        return self._download_result(
            build_download(content, f"{year}-season.csv"),
            fmt="metadata-csv",
            rows=len(result.documents),
            warnings=self._failure_warnings(result),
        )

    @staticmethod
    def _download_result(
        download: CsvDownload,
        *,
        fmt: str,
        rows: int,
        slug: str | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        data: dict[str, Any] = {
            "filename": download.filename,
            "mime_type": download.mime_type,
            "headers": download.headers,
            "content": download.content,
            "format": fmt,
            "rows": rows,
        }
        if slug is not None:
            data["slug"] = slug
        return ServiceResult(ok=True, op="export", data=data, warnings=warnings or [])
