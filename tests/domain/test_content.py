"""Tests for frontmatter parsing, rendering and the document model."""

from __future__ import annotations

import pytest

from gamestats.domain.content import (
    FrontmatterParseError,
    ParsedDocument,
    parse_frontmatter,
    render_frontmatter,
    to_plain,
)


class TestParseFrontmatter:
    def test_basic(self) -> None:
        content = "---\nopponent: Duke\nseason: 2023\n---\n\nBody text\n"
        fm, body = parse_frontmatter(content)
        assert fm == {"opponent": "Duke", "season": 2023}
        assert body == "Body text\n"

    def test_nested_mapping_is_plain_dict(self) -> None:
        content = "---\nscore:\n  clemson: 66\n  opponent: 20\n---\n"
        fm, _ = parse_frontmatter(content)
        assert fm["score"] == {"clemson": 66, "opponent": 20}
        assert type(fm["score"]) is dict

    def test_unquoted_date_becomes_iso_string(self) -> None:
        fm, _ = parse_frontmatter("---\ngame_date: 2024-09-07\n---\n")
        assert fm["game_date"] == "2024-09-07"

    def test_crlf_line_endings(self) -> None:
        fm, body = parse_frontmatter("---\r\nopponent: Duke\r\n---\r\nBody\r\n")
        assert fm == {"opponent": "Duke"}
        assert body.startswith("Body")

    def test_no_frontmatter(self) -> None:
        content = "# Just a heading\n"
        assert parse_frontmatter(content) == ({}, content)

    def test_unclosed_block_is_body(self) -> None:
        content = "---\nopponent: Duke\n"
        assert parse_frontmatter(content) == ({}, content)

    def test_empty_block(self) -> None:
        fm, body = parse_frontmatter("---\n---\nBody")
        assert fm == {}
        assert body == "Body"

    def test_invalid_yaml(self) -> None:
        with pytest.raises(FrontmatterParseError):
            parse_frontmatter("---\nopponent: [unclosed\n---\n")

    def test_non_mapping_yaml(self) -> None:
        with pytest.raises(FrontmatterParseError, match="mapping"):
            parse_frontmatter("---\n- a\n- b\n---\n")


class TestRenderFrontmatter:
    def test_round_trip(self) -> None:
        fm = {"opponent": "Duke", "game_date": "2023-09-04", "score": {"clemson": 7, "opponent": 28}}
        text = render_frontmatter(fm, "Body\n")
        parsed, body = parse_frontmatter(text)
        assert parsed == fm
        assert body == "Body\n"

    def test_canonical_order(self) -> None:
        text = render_frontmatter({"slug": "x", "opponent": "Duke", "game_date": "2023-09-04"}, "")
        lines = text.splitlines()
        assert lines[0] == "---"
        assert lines[1].startswith("game_date:")
        assert lines[2].startswith("opponent:")
        assert lines[3].startswith("slug:")
        assert lines[-1] == "---"

    def test_slug_round_trip(self) -> None:
        text = render_frontmatter({"slug": "2023-09-04-duke"}, "")
        assert parse_frontmatter(text)[0]["slug"] == "2023-09-04-duke"


class TestToPlain:
    def test_scalars_and_containers(self) -> None:
        assert to_plain({"a": [1, 2.5, True, None]}) == {"a": [1, 2.5, True, None]}


class TestParsedDocument:
    def _doc(self, **fm: object) -> ParsedDocument:
        return ParsedDocument(frontmatter=dict(fm), html="", raw_body="", slug="s")

    def test_score_and_outcome(self) -> None:
        doc = self._doc(score={"clemson": 66, "opponent": 20})
        assert doc.score == (66, 20)
        assert doc.outcome == "win"

    def test_missing_score_is_tie_at_zero(self) -> None:
        doc = self._doc()
        assert doc.score == (0, 0)
        assert doc.outcome == "tie"

    def test_accessors(self) -> None:
        doc = self._doc(game_date="2023-09-04", opponent="Duke", season=2023)
        assert doc.game_date == "2023-09-04"
        assert doc.opponent == "Duke"
        assert doc.season == 2023

    def test_non_integer_season(self) -> None:
        assert self._doc(season="2023").season is None

    def test_frozen(self) -> None:
        doc = self._doc()
        with pytest.raises(Exception):
            doc.slug = "other"  # type: ignore[misc]
