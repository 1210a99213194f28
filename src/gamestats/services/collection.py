"""Game collection: batch listing, lookup, filtering and aggregates.

Documents are read from the games source (and optionally the evaluations
source) and parsed one at a time. A document that fails to read, parse or
validate is logged and recorded as a :class:`ParseFailure`; it never aborts
the batch.

Single-document lookups are linear scans. ``get_by_slug`` normalizes every
failure to ``None``; ``get_by_slug_strict`` raises instead.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel

from gamestats.domain.content import DocumentError, ParsedDocument
from gamestats.domain.frontmatter import (
    FrontmatterValidationError,
    Outcome,
    validate_frontmatter_strict,
)
from gamestats.domain.slugs import to_iso_date
from gamestats.services.parser import DocumentParser

if TYPE_CHECKING:
    from gamestats.infrastructure.sources import ContentSource
    from gamestats.services.parser import ParseOptions

logger = logging.getLogger(__name__)

SortField = Literal["game_date", "opponent", "score", "season"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("game_date", "opponent", "score", "season")


class DocumentNotFoundError(LookupError):
    """No document matches the requested slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Game not found: {slug}")


# ---------------------------------------------------------------------------
# Query types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameFilters:
    """Exact-match filters, AND-combined. ``None`` means unfiltered."""

    season: int | None = None
    opponent: str | None = None
    game_type: str | None = None
    content_type: str | None = None
    home_away: str | None = None
    result: Outcome | None = None

    def matches(self, doc: ParsedDocument) -> bool:
        fm = doc.frontmatter
        if self.season is not None and fm.get("season") != self.season:
            return False
        if self.opponent is not None and fm.get("opponent") != self.opponent:
            return False
        if self.game_type is not None and fm.get("game_type") != self.game_type:
            return False
        if self.content_type is not None and fm.get("content_type") != self.content_type:
            return False
        if self.home_away is not None and fm.get("home_away") != self.home_away:
            return False
        return self.result is None or doc.outcome == self.result


@dataclass(frozen=True)
class GameSort:
    field: SortField = "game_date"
    order: SortOrder = "desc"


@dataclass(frozen=True)
class ParseFailure:
    """One document that could not be loaded."""

    source: str
    error: str


@dataclass(frozen=True)
class CollectionResult:
    documents: list[ParsedDocument] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Matching documents plus documents that failed to load."""
        return len(self.documents) + len(self.failures)

    def items(self, limit: int | None = None) -> list[GameRecord]:
        """List items for the first *limit* documents (all when ``None``)."""
        docs = self.documents if limit is None else self.documents[:limit]
        return [GameRecord.from_document(doc) for doc in docs]


class GameRecord(BaseModel):
    """Flattened list item for one game."""

    model_config = {"frozen": True}

    slug: str
    opponent: str
    opponent_short: str | None = None
    game_date: str
    own_score: int
    rival_score: int
    season: int | None = None
    game_type: str | None = None
    content_type: str | None = None
    home_away: str | None = None
    result: Outcome

    @classmethod
    def from_document(cls, doc: ParsedDocument) -> GameRecord:
        fm = doc.frontmatter
        own, rival = doc.score
        return cls(
            slug=doc.slug,
            opponent=doc.opponent,
            opponent_short=_optional_str(fm.get("opponent_short")),
            game_date=doc.game_date,
            own_score=own,
            rival_score=rival,
            season=doc.season,
            game_type=_optional_str(fm.get("game_type")),
            content_type=_optional_str(fm.get("content_type")),
            home_away=_optional_str(fm.get("home_away")),
            result=doc.outcome,
        )


class RecordSummary(BaseModel):
    """Win/loss record and scoring totals over a set of games."""

    model_config = {"frozen": True}

    total_games: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    win_percentage: float = 0.0
    total_points_scored: int = 0
    total_points_allowed: int = 0
    average_points_scored: float = 0.0
    average_points_allowed: float = 0.0


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Filtering, sorting, aggregates
# ---------------------------------------------------------------------------


def filter_documents(docs: Sequence[ParsedDocument], filters: GameFilters) -> list[ParsedDocument]:
    return [doc for doc in docs if filters.matches(doc)]


def _date_key(doc: ParsedDocument) -> str:
    try:
        return to_iso_date(doc.game_date)
    except ValueError:
        return ""


_SORT_KEYS: dict[str, Callable[[ParsedDocument], Any]] = {
    "game_date": _date_key,
    "opponent": lambda doc: doc.opponent.lower(),
    "score": lambda doc: doc.score[0] - doc.score[1],
    "season": lambda doc: doc.season or 0,
}


def sort_documents(docs: Sequence[ParsedDocument], sort: GameSort) -> list[ParsedDocument]:
    """Stable sort by *sort.field*; ties keep their input order.

    Raises:
        ValueError: If the sort field is unknown.
    """
    try:
        key = _SORT_KEYS[sort.field]
    except KeyError:
        msg = f"Unknown sort field {sort.field!r}; expected one of {', '.join(SORT_FIELDS)}"
        raise ValueError(msg) from None
    return sorted(docs, key=key, reverse=sort.order == "desc")


def summarize(docs: Sequence[ParsedDocument]) -> RecordSummary:
    """Fold *docs* into a :class:`RecordSummary`. No games gives zeros."""
    if not docs:
        return RecordSummary()

    wins = losses = ties = scored = allowed = 0
    for doc in docs:
        own, rival = doc.score
        scored += own
        allowed += rival
        match doc.outcome:
            case "win":
                wins += 1
            case "loss":
                losses += 1
            case _:
                ties += 1

    total = len(docs)
    return RecordSummary(
        total_games=total,
        wins=wins,
        losses=losses,
        ties=ties,
        win_percentage=wins / total * 100,
        total_points_scored=scored,
        total_points_allowed=allowed,
        average_points_scored=scored / total,
        average_points_allowed=allowed / total,
    )


# ---------------------------------------------------------------------------
# GameCollection
# ---------------------------------------------------------------------------


class GameCollection:
    """Game documents from a games source and an optional evaluations source."""

    def __init__(
        self,
        games: ContentSource,
        evaluations: ContentSource | None = None,
        parser: DocumentParser | None = None,
    ) -> None:
        self._games = games
        self._evaluations = evaluations
        self._parser = parser or DocumentParser()

    # -- enumeration ---------------------------------------------------

    def _entries(self, include_evaluations: bool) -> list[tuple[ContentSource, str]]:
        sources = [self._games]
        if include_evaluations and self._evaluations is not None:
            sources.append(self._evaluations)
        return [(source, name) for source in sources for name in source.list_documents()]

    def _parse(
        self, source: ContentSource, name: str, *, excerpt: bool = True
    ) -> ParsedDocument:
        options: ParseOptions | None = None
        if not excerpt:
            options = dataclasses.replace(self._parser.options, generate_excerpt=False)
        return self._parser.parse_from(source, name, options=options)

    def _scan(
        self, *, include_evaluations: bool, excerpt: bool = True
    ) -> Iterator[ParsedDocument]:
        """Yield each parseable document, logging the ones that fail."""
        for source, name in self._entries(include_evaluations):
            try:
                yield self._parse(source, name, excerpt=excerpt)
            except DocumentError as exc:
                logger.error("Error parsing %s: %s", source.describe(name), exc)

    # -- batch ---------------------------------------------------------

    def load(
        self,
        *,
        validate: bool = True,
        include_evaluations: bool = False,
        filters: GameFilters | None = None,
        sort: GameSort | None = None,
    ) -> CollectionResult:
        """Parse every document, then filter and sort the successes.

        With *validate*, frontmatter must also pass strict schema
        validation; failures are recorded like parse errors.
        """
        entries = self._entries(include_evaluations)
        documents: list[ParsedDocument] = []
        failures: list[ParseFailure] = []

        for source, name in entries:
            where = source.describe(name)
            try:
                doc = self._parse(source, name)
                if validate:
                    validate_frontmatter_strict(doc.frontmatter)
            except (DocumentError, FrontmatterValidationError) as exc:
                logger.error("Error parsing %s: %s", where, exc)
                failures.append(ParseFailure(source=where, error=str(exc)))
                continue
            documents.append(doc)

        if failures:
            logger.warning("Failed to parse %d of %d game files", len(failures), len(entries))

        if filters is not None:
            documents = filter_documents(documents, filters)
        documents = sort_documents(documents, sort or GameSort())
        return CollectionResult(documents=documents, failures=failures)

    def list_all(self, **options: Any) -> list[ParsedDocument]:
        """Documents only; see :meth:`load` for *options*."""
        return self.load(**options).documents

    # -- lookups -------------------------------------------------------

    def _find(
        self,
        predicate: Callable[[ParsedDocument], bool],
        *,
        validate: bool,
        include_evaluations: bool,
    ) -> ParsedDocument | None:
        for doc in self._scan(include_evaluations=include_evaluations):
            if not predicate(doc):
                continue
            if validate:
                try:
                    validate_frontmatter_strict(doc.frontmatter)
                except FrontmatterValidationError as exc:
                    logger.error("Error parsing %s: %s", doc.source, exc)
                    continue
            return doc
        return None

    def get_by_slug(
        self,
        slug: str,
        *,
        validate: bool = True,
        include_evaluations: bool = False,
    ) -> ParsedDocument | None:
        """First document whose slug is *slug*, or ``None``."""
        return self._find(
            lambda doc: doc.slug == slug,
            validate=validate,
            include_evaluations=include_evaluations,
        )

    def get_by_slug_strict(
        self,
        slug: str,
        *,
        validate: bool = True,
        include_evaluations: bool = False,
    ) -> ParsedDocument:
        """Like :meth:`get_by_slug` but raises instead of returning ``None``.

        Raises:
            DocumentNotFoundError: No parseable document has *slug*.
            FrontmatterValidationError: The match fails validation.
        """
        doc = self._find(
            lambda d: d.slug == slug,
            validate=False,
            include_evaluations=include_evaluations,
        )
        if doc is None:
            raise DocumentNotFoundError(slug)
        if validate:
            validate_frontmatter_strict(doc.frontmatter)
        return doc

    def exists(self, slug: str, *, include_evaluations: bool = False) -> bool:
        found = self.get_by_slug(slug, validate=False, include_evaluations=include_evaluations)
        return found is not None

    def slugs(self, *, include_evaluations: bool = False) -> list[str]:
        """Slugs of every parseable document, in source order."""
        docs = self._scan(include_evaluations=include_evaluations, excerpt=False)
        return [doc.slug for doc in docs]

    def get_by_date_and_opponent(
        self,
        game_date: str,
        opponent: str,
        *,
        validate: bool = True,
        include_evaluations: bool = False,
    ) -> ParsedDocument | None:
        return self._find(
            lambda doc: doc.game_date == game_date and doc.opponent == opponent,
            validate=validate,
            include_evaluations=include_evaluations,
        )

    def recent(
        self,
        limit: int = 5,
        *,
        validate: bool = True,
        include_evaluations: bool = False,
    ) -> list[ParsedDocument]:
        """Most recent games first."""
        docs = self.list_all(validate=validate, include_evaluations=include_evaluations)
        return docs[: max(limit, 0)]

    def related(
        self,
        slug: str,
        *,
        limit: int = 5,
        same_opponent: bool = True,
        same_season: bool = False,
        validate: bool = False,
    ) -> list[ParsedDocument]:
        """Games sharing the opponent and/or season of *slug*, newest first.

        Only the games source is searched. Unknown slugs give ``[]``.
        """
        current = self.get_by_slug(slug, validate=False)
        if current is None:
            return []

        related: list[ParsedDocument] = []
        for doc in self._scan(include_evaluations=False, excerpt=False):
            if doc.slug == slug:
                continue
            is_related = (same_opponent and doc.opponent == current.opponent) or (
                same_season and doc.season == current.season
            )
            if not is_related:
                continue
            if validate:
                try:
                    validate_frontmatter_strict(doc.frontmatter)
                except FrontmatterValidationError as exc:
                    logger.error("Error parsing %s: %s", doc.source, exc)
                    continue
            related.append(doc)
        return sort_documents(related, GameSort())[: max(limit, 0)]

    # -- aggregates ----------------------------------------------------

    def seasons(self) -> list[int]:
        """Distinct seasons, newest first."""
        docs = self.list_all(validate=False)
        return sorted({doc.season for doc in docs if doc.season is not None}, reverse=True)

    def opponents(self) -> list[str]:
        """Distinct opponent names, sorted."""
        return sorted({doc.opponent for doc in self.list_all(validate=False) if doc.opponent})

    def summary(self, filters: GameFilters | None = None) -> RecordSummary:
        return summarize(self.list_all(validate=False, filters=filters))
