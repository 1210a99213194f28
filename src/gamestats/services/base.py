"""BaseService — foundation for the gamestats services.

Every service receives a :class:`ContentLibrary` at construction time. The
library provides the content sources, the parser and the game collection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gamestats.infrastructure.library import ContentLibrary
    from gamestats.services.collection import CollectionResult


class BaseService:
    """Base for service-layer classes.

    Usage::

        class QueryService(BaseService):
            def list_games(self, ...) -> ServiceResult:
                result = self._library.collection.load(...)
                ...
    """

    def __init__(self, library: ContentLibrary) -> None:
        self._library = library

    @staticmethod
    def _failure_warnings(result: CollectionResult) -> list[str]:
        """One warning per document that failed to load."""
        return [f"Skipped {failure.source}: {failure.error}" for failure in result.failures]
