"""Document parser: raw markdown text to :class:`ParsedDocument`.

Pipeline per document:

1. read the text (file or content source)
2. split frontmatter from body
3. resolve the slug: explicit ``slug`` -> ``game_date`` + ``opponent`` ->
   file name
4. render the body to HTML
5. optionally build a plain-text excerpt

Each failure kind raises its own :class:`DocumentError` subclass. The parsed
frontmatter is never mutated; the resolved slug goes into a new mapping.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gamestats.domain.content import (
    ContentReadError,
    HtmlConversionError,
    ParsedDocument,
    SlugDerivationError,
    parse_frontmatter,
)
from gamestats.domain.slugs import game_slug, slugify
from gamestats.infrastructure.markdown import build_markdown

if TYPE_CHECKING:
    from markdown_it import MarkdownIt

    from gamestats.infrastructure.sources import ContentSource

DEFAULT_EXCERPT_LENGTH = 200

_HEADING_MARKS = re.compile(r"#{1,6}\s+")
_EMPHASIS_MARKS = re.compile(r"[*_~`]")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParseOptions:
    """Per-parse options."""

    generate_excerpt: bool = True
    excerpt_length: int = DEFAULT_EXCERPT_LENGTH


def extract_excerpt(text: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Plain-text preview of a markdown body.

    Heading and emphasis markers are stripped, links reduced to their text,
    and whitespace collapsed. Long text is cut at the last space before
    *max_length* and suffixed with ``...``.
    """
    plain = _HEADING_MARKS.sub("", text)
    plain = _EMPHASIS_MARKS.sub("", plain)
    plain = _LINK.sub(r"\1", plain)
    plain = _WHITESPACE.sub(" ", plain).strip()

    if len(plain) <= max_length:
        return plain

    truncated = plain[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated + "..."


def derive_slug(frontmatter: Mapping[str, Any], *, fallback_name: str | None = None) -> str:
    """Resolve the document slug.

    Raises:
        SlugDerivationError: If there is no explicit slug, no
            ``game_date``/``opponent`` pair and no *fallback_name*, or the
            game date cannot be parsed.
    """
    explicit = frontmatter.get("slug")
    if explicit:
        return str(explicit)

    game_date = frontmatter.get("game_date")
    opponent = frontmatter.get("opponent")
    if game_date and opponent:
        try:
            return game_slug(game_date, str(opponent))
        except ValueError as exc:
            msg = f"Cannot generate slug: invalid game_date {game_date!r}"
            raise SlugDerivationError(msg) from exc

    if fallback_name:
        return slugify(Path(fallback_name).stem)

    msg = "Cannot generate slug: missing game_date or opponent in frontmatter"
    raise SlugDerivationError(msg)


class DocumentParser:
    """Parses markdown documents with a shared markdown renderer."""

    def __init__(self, options: ParseOptions | None = None) -> None:
        self.options = options or ParseOptions()
        self._md: MarkdownIt = build_markdown()

    def parse(
        self,
        text: str,
        *,
        name: str | None = None,
        options: ParseOptions | None = None,
    ) -> ParsedDocument:
        """Parse document *text*.

        Args:
            text: Full document text, frontmatter included.
            name: Source file name. Enables the filename slug fallback and
                is recorded as ``ParsedDocument.source``.
            options: Overrides the parser's default options.

        Raises:
            FrontmatterParseError: Malformed frontmatter block.
            SlugDerivationError: No slug could be derived.
            HtmlConversionError: Markdown rendering failed.
        """
        opts = options or self.options
        frontmatter, raw_body = parse_frontmatter(text)

        slug = derive_slug(frontmatter, fallback_name=name)

        try:
            html = self._md.render(raw_body)
        except Exception as exc:
            where = f" in {name}" if name else ""
            msg = f"Failed to convert markdown to HTML{where}: {exc}"
            raise HtmlConversionError(msg) from exc

        excerpt = extract_excerpt(raw_body, opts.excerpt_length) if opts.generate_excerpt else None

        return ParsedDocument(
            frontmatter={**frontmatter, "slug": slug},
            html=html,
            raw_body=raw_body,
            slug=slug,
            excerpt=excerpt,
            source=name,
        )

    def parse_file(self, path: Path | str, *, options: ParseOptions | None = None) -> ParsedDocument:
        """Read and parse the document at *path*.

        Raises:
            ContentReadError: If the file cannot be read.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read file {path}: {exc}"
            raise ContentReadError(msg) from exc
        return self.parse(text, name=path.name, options=options)

    def parse_from(
        self,
        source: ContentSource,
        name: str,
        *,
        options: ParseOptions | None = None,
    ) -> ParsedDocument:
        """Read document *name* from *source* and parse it."""
        try:
            text = source.read(name)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read file {source.describe(name)}: {exc}"
            raise ContentReadError(msg) from exc
        return self.parse(text, name=name, options=options)


def parse_markdown_string(text: str, *, options: ParseOptions | None = None) -> ParsedDocument:
    """Parse a bare string (no filename slug fallback)."""
    return DocumentParser(options).parse(text)


def parse_markdown_file(path: Path | str, *, options: ParseOptions | None = None) -> ParsedDocument:
    """Parse the markdown file at *path*."""
    return DocumentParser(options).parse_file(path)
