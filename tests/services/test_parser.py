"""Tests for the document parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from gamestats.domain.content import (
    ContentReadError,
    FrontmatterParseError,
    SlugDerivationError,
    render_frontmatter,
)
from gamestats.infrastructure.sources import MemorySource
from gamestats.services.parser import (
    DocumentParser,
    ParseOptions,
    derive_slug,
    extract_excerpt,
    parse_markdown_file,
    parse_markdown_string,
)
from tests.conftest import APP_STATE, game_text


class TestDeriveSlug:
    def test_explicit_slug_wins(self) -> None:
        fm = {"slug": "custom", "game_date": "2024-09-07", "opponent": "Appalachian State"}
        assert derive_slug(fm) == "custom"

    def test_from_date_and_opponent(self) -> None:
        fm = {"game_date": "2024-09-07", "opponent": "Appalachian State"}
        assert derive_slug(fm) == "2024-09-07-appalachian-state"

    def test_filename_fallback(self) -> None:
        assert derive_slug({}, fallback_name="Season Preview.md") == "season-preview"

    def test_no_source_raises(self) -> None:
        with pytest.raises(SlugDerivationError, match="missing game_date or opponent"):
            derive_slug({"opponent": "Duke"})

    def test_bad_date_raises(self) -> None:
        with pytest.raises(SlugDerivationError, match="invalid game_date"):
            derive_slug({"game_date": "someday", "opponent": "Duke"}, fallback_name="x.md")


class TestExcerpt:
    def test_strips_markup(self) -> None:
        text = "## Recap\n\nA **big** win over [Duke](https://example.com).\n"
        assert extract_excerpt(text) == "Recap A big win over Duke."

    def test_truncates_at_word_boundary(self) -> None:
        text = "alpha beta gamma delta"
        assert extract_excerpt(text, 12) == "alpha beta..."

    def test_hard_cut_without_space(self) -> None:
        assert extract_excerpt("abcdefghij", 4) == "abcd..."

    def test_short_text_untouched(self) -> None:
        assert extract_excerpt("short", 200) == "short"


class TestDocumentParser:
    def test_parse_full_document(self) -> None:
        doc = DocumentParser().parse(APP_STATE, name="2024-09-07-appalachian-state.md")
        assert doc.slug == "2024-09-07-appalachian-state"
        assert doc.frontmatter["slug"] == doc.slug
        assert doc.frontmatter["opponent"] == "Appalachian State"
        assert doc.source == "2024-09-07-appalachian-state.md"
        assert "<table>" in doc.html
        assert doc.raw_body.startswith("# Clemson vs Appalachian State")
        assert doc.excerpt is not None
        assert len(doc.excerpt) <= 203

    def test_win_result(self) -> None:
        doc = DocumentParser().parse(APP_STATE)
        assert doc.score == (66, 20)
        assert doc.outcome == "win"

    def test_slug_round_trip_through_frontmatter(self) -> None:
        parser = DocumentParser()
        first = parser.parse(game_text("2023-09-04", "Duke", 7, 28))
        text = render_frontmatter(first.frontmatter, first.raw_body)
        second = parser.parse(text)
        assert second.slug == first.slug
        assert second.frontmatter == first.frontmatter

    def test_frontmatter_not_mutated(self) -> None:
        text = game_text("2023-09-04", "Duke", 7, 28)
        doc = DocumentParser().parse(text)
        assert "slug" not in text
        assert doc.frontmatter["slug"] == "2023-09-04-duke"

    def test_excerpt_disabled(self) -> None:
        parser = DocumentParser(ParseOptions(generate_excerpt=False))
        assert parser.parse(APP_STATE).excerpt is None

    def test_per_call_options(self) -> None:
        doc = DocumentParser().parse(APP_STATE, options=ParseOptions(excerpt_length=20))
        assert doc.excerpt is not None
        assert doc.excerpt.endswith("...")
        assert len(doc.excerpt) <= 23

    def test_no_frontmatter_uses_filename(self) -> None:
        doc = DocumentParser().parse("# Notes\n", name="Bye Week.md")
        assert doc.slug == "bye-week"
        assert doc.frontmatter == {"slug": "bye-week"}

    def test_no_slug_source(self) -> None:
        with pytest.raises(SlugDerivationError):
            DocumentParser().parse("# Notes\n")

    def test_bad_yaml(self) -> None:
        with pytest.raises(FrontmatterParseError):
            DocumentParser().parse("---\nopponent: [\n---\n", name="x.md")

    def test_parse_file(self, tmp_path: Path) -> None:
        path = tmp_path / "2024-09-07-appalachian-state.md"
        path.write_text(APP_STATE, encoding="utf-8")
        doc = parse_markdown_file(path)
        assert doc.slug == "2024-09-07-appalachian-state"
        assert doc.source == path.name

    def test_parse_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ContentReadError, match="Failed to read file"):
            DocumentParser().parse_file(tmp_path / "missing.md")

    def test_parse_from_source(self) -> None:
        source = MemorySource({"duke.md": game_text("2023-09-04", "Duke", 7, 28)})
        doc = DocumentParser().parse_from(source, "duke.md")
        assert doc.slug == "2023-09-04-duke"

    def test_parse_from_missing(self) -> None:
        with pytest.raises(ContentReadError, match="memory:memory/nope.md"):
            DocumentParser().parse_from(MemorySource(), "nope.md")

    def test_parse_markdown_string(self) -> None:
        assert parse_markdown_string(APP_STATE).source is None
