"""ContentLibrary: the single dependency injected into every service.

The library owns the content sources (games, evaluations, templates), the
document parser and the game collection built over them. Directory sources
are resolved from :class:`GameStatsSettings`; tests build a library over
in-memory sources with :meth:`ContentLibrary.from_sources`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gamestats.config.settings import GameStatsSettings
from gamestats.infrastructure.sources import DirectorySource, MemorySource
from gamestats.services.collection import GameCollection
from gamestats.services.parser import DocumentParser, ParseOptions

if TYPE_CHECKING:
    from pathlib import Path

    from gamestats.infrastructure.sources import ContentSource

logger = logging.getLogger(__name__)


class ContentLibrary:
    """Content sources, parser and collection for one content root.

    Created once per CLI invocation by ``AppContext`` and stored in
    ``click.Context.obj``. Services receive it via their
    :class:`BaseService` constructor.
    """

    def __init__(
        self,
        settings: GameStatsSettings,
        *,
        games: ContentSource | None = None,
        evaluations: ContentSource | None = None,
        templates: ContentSource | None = None,
    ) -> None:
        self._settings = settings
        self._games = games or DirectorySource(settings.games_path)
        self._evaluations = evaluations or DirectorySource(settings.evaluations_path)
        self._templates = templates or DirectorySource(settings.templates_path)
        self._parser = DocumentParser(
            ParseOptions(
                generate_excerpt=settings.parser.generate_excerpt,
                excerpt_length=settings.parser.excerpt_length,
            )
        )
        self._collection: GameCollection | None = None
        logger.debug(
            "Content library: games=%s evaluations=%s templates=%s",
            self._games.label,
            self._evaluations.label,
            self._templates.label,
        )

    @classmethod
    def from_sources(
        cls,
        games: ContentSource | dict[str, str],
        evaluations: ContentSource | dict[str, str] | None = None,
        templates: ContentSource | dict[str, str] | None = None,
        *,
        settings: GameStatsSettings | None = None,
    ) -> ContentLibrary:
        """Build a library over explicit sources.

        Plain ``{name: text}`` mappings are wrapped in :class:`MemorySource`.
        Missing sources are empty.
        """

        def _source(value: ContentSource | dict[str, str] | None, label: str) -> ContentSource:
            if value is None:
                return MemorySource(label=label)
            if isinstance(value, dict):
                return MemorySource(value, label=label)
            return value

        return cls(
            settings or GameStatsSettings(),
            games=_source(games, "games"),
            evaluations=_source(evaluations, "evaluations"),
            templates=_source(templates, "templates"),
        )

    @property
    def root(self) -> Path:
        """The content root directory."""
        return self._settings.content_root

    @property
    def settings(self) -> GameStatsSettings:
        return self._settings

    @property
    def games(self) -> ContentSource:
        return self._games

    @property
    def evaluations(self) -> ContentSource:
        return self._evaluations

    @property
    def templates(self) -> ContentSource:
        return self._templates

    @property
    def parser(self) -> DocumentParser:
        return self._parser

    @property
    def collection(self) -> GameCollection:
        """The game collection (built on first access)."""
        if self._collection is None:
            self._collection = GameCollection(
                self._games,
                evaluations=self._evaluations,
                parser=self._parser,
            )
        return self._collection
