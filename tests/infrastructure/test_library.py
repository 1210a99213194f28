"""Tests for ContentLibrary wiring."""

from __future__ import annotations

from pathlib import Path

from gamestats.config.settings import GameStatsSettings
from gamestats.infrastructure.library import ContentLibrary
from gamestats.infrastructure.sources import DirectorySource, MemorySource
from tests.conftest import GAMES


class TestContentLibrary:
    def test_directory_sources_from_settings(self, content_root: Path) -> None:
        library = ContentLibrary(GameStatsSettings(content_root=content_root))
        assert isinstance(library.games, DirectorySource)
        assert library.games.label == str(content_root / "content" / "games")
        assert library.evaluations.label == str(content_root / "content" / "evaluations")
        assert library.templates.label == str(content_root / "content" / "templates")
        assert library.root == content_root
        assert sorted(library.games.list_documents()) == sorted(GAMES)

    def test_parser_options_from_settings(self, tmp_path: Path) -> None:
        settings = GameStatsSettings(
            content_root=tmp_path,
            parser={"generate_excerpt": False, "excerpt_length": 50},
        )
        library = ContentLibrary(settings)
        assert library.parser.options.generate_excerpt is False
        assert library.parser.options.excerpt_length == 50

    def test_from_sources_wraps_mappings(self) -> None:
        library = ContentLibrary.from_sources({"a.md": "x"})
        assert isinstance(library.games, MemorySource)
        assert library.games.list_documents() == ["a.md"]
        assert library.evaluations.list_documents() == []
        assert library.templates.list_documents() == []

    def test_from_sources_keeps_source_objects(self) -> None:
        games = MemorySource({"a.md": "x"}, label="custom")
        library = ContentLibrary.from_sources(games)
        assert library.games is games

    def test_collection_is_cached(self, library: ContentLibrary) -> None:
        assert library.collection is library.collection
