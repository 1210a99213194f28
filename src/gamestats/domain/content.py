"""Document model and frontmatter parsing.

A game document is a UTF-8 markdown file with a ``---`` delimited YAML
frontmatter block followed by the markdown body:

- ``parse_frontmatter()``: splits text into ``(frontmatter, body)``.
- ``render_frontmatter()``: the inverse, with canonical key order.
- :class:`ParsedDocument`: the immutable output of the document parser.

The error classes here form the parse failure taxonomy. Each kind is
distinct so callers can tell an unreadable file from a broken YAML block.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from io import StringIO
from typing import Any

from pydantic import BaseModel
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from gamestats.domain.frontmatter import Outcome, game_outcome, order_frontmatter

_FRONTMATTER_DELIMITER = "---"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class DocumentError(Exception):
    """Base class for per-document parse failures."""


class ContentReadError(DocumentError):
    """The document could not be read."""


class FrontmatterParseError(DocumentError):
    """The frontmatter block is not valid YAML or not a mapping."""


class HtmlConversionError(DocumentError):
    """The markdown body could not be converted to HTML."""


class SlugDerivationError(DocumentError):
    """No slug could be derived for the document."""


# ---------------------------------------------------------------------------
# YAML parser (round-trip preserves comments and quote styles)
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    A new instance per call avoids corrupted internal emitter state from
    propagating across operations (ruamel.yaml's YAML object is stateful
    and a failed dump can leave the singleton in a broken state).
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    return y


def to_plain(value: Any) -> Any:
    """Convert ruamel containers and scalars into plain Python values.

    Unquoted YAML dates (``game_date: 2024-09-07``) become ISO strings so
    they validate the same way as quoted ones.
    """
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return str(value)
    return value


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Handles both ``\\n`` and ``\\r\\n`` line endings.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        frontmatter delimiters are found, returns ``({}, content)``.

    Raises:
        FrontmatterParseError: If the block is not valid YAML or is not a
            mapping.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    if body.startswith("\n"):
        body = body[1:]

    try:
        loaded = _new_yaml().load(yaml_block)
    except YAMLError as exc:
        raise FrontmatterParseError(str(exc)) from exc

    if loaded is None:
        return {}, body
    if not isinstance(loaded, Mapping):
        msg = f"Frontmatter must be a mapping, got {type(loaded).__name__}"
        raise FrontmatterParseError(msg)
    return to_plain(loaded), body


def render_frontmatter(frontmatter: Mapping[str, Any], body: str) -> str:
    """Render a frontmatter mapping and body text into markdown.

    Keys are emitted in canonical order; unknown keys are appended
    alphabetically at the end.
    """
    ordered = order_frontmatter(frontmatter)
    buf = StringIO()
    _new_yaml().dump(ordered, buf)
    yaml_text = buf.getvalue()

    parts = [_FRONTMATTER_DELIMITER, "\n", yaml_text, _FRONTMATTER_DELIMITER, "\n"]
    if body:
        parts.append(body)
    return "".join(parts)


# ---------------------------------------------------------------------------
# Parsed document
# ---------------------------------------------------------------------------


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


class ParsedDocument(BaseModel):
    """One parsed game document.

    Attributes:
        frontmatter: Frontmatter mapping, including the resolved ``slug``.
        html: Body rendered to HTML.
        raw_body: Markdown body without the frontmatter block.
        slug: URL slug (explicit, derived from date + opponent, or filename).
        excerpt: Plain-text preview, when requested.
        source: Name of the document this was parsed from, if known.
    """

    model_config = {"frozen": True}

    frontmatter: dict[str, Any]
    html: str
    raw_body: str
    slug: str
    excerpt: str | None = None
    source: str | None = None

    @property
    def score(self) -> tuple[int, int]:
        """``(own, rival)`` score; missing values count as 0."""
        raw = self.frontmatter.get("score")
        if not isinstance(raw, Mapping):
            return 0, 0
        return _as_int(raw.get("clemson")), _as_int(raw.get("opponent"))

    @property
    def outcome(self) -> Outcome:
        return game_outcome(*self.score)

    @property
    def game_date(self) -> str:
        return str(self.frontmatter.get("game_date", ""))

    @property
    def opponent(self) -> str:
        return str(self.frontmatter.get("opponent", ""))

    @property
    def season(self) -> int | None:
        season = self.frontmatter.get("season")
        return season if isinstance(season, int) and not isinstance(season, bool) else None
