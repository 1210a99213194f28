"""QueryService — read-only access to games and their tables.

Extends BaseService. Every method returns a ServiceResult; documents that
fail to load during a listing surface as warnings, not errors.
"""

from __future__ import annotations

from typing import Any, cast

from gamestats.domain.content import ParsedDocument
from gamestats.domain.frontmatter import FrontmatterValidationError, Outcome
from gamestats.domain.tables import extract_table, extract_team_section, list_table_titles
from gamestats.services.base import BaseService
from gamestats.services.collection import (
    SORT_FIELDS,
    DocumentNotFoundError,
    GameFilters,
    GameSort,
    SortField,
    SortOrder,
)
from gamestats.services.result import ServiceResult


class QueryService(BaseService):
    """Listing, lookup, aggregate and table queries."""

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    def list_games(
        self,
        *,
        season: int | None = None,
        opponent: str | None = None,
        game_type: str | None = None,
        content_type: str | None = None,
        home_away: str | None = None,
        result: Outcome | None = None,
        sort: str = "game_date",
        order: str = "desc",
        include_evaluations: bool = False,
        validate: bool = False,
        limit: int | None = None,
    ) -> ServiceResult:
        """Filtered, sorted game list items."""
        if sort not in SORT_FIELDS:
            return ServiceResult.failure(
                "list_games",
                "INVALID_SORT",
                f"Unknown sort field '{sort}'. Expected one of: {', '.join(SORT_FIELDS)}",
            )
        if order not in ("asc", "desc"):
            return ServiceResult.failure(
                "list_games", "INVALID_SORT", f"Unknown sort order '{order}'. Expected asc or desc"
            )

        filters = GameFilters(
            season=season,
            opponent=opponent,
            game_type=game_type,
            content_type=content_type,
            home_away=home_away,
            result=result,
        )
        loaded = self._library.collection.load(
            validate=validate,
            include_evaluations=include_evaluations,
            filters=filters,
            sort=GameSort(field=cast(SortField, sort), order=cast(SortOrder, order)),
        )
        items = [record.model_dump() for record in loaded.items(limit)]

        return ServiceResult(
            ok=True,
            op="list_games",
            data={"count": len(items), "items": items},
            warnings=self._failure_warnings(loaded),
            meta={"total": loaded.total, "failed": len(loaded.failures)},
        )

    def get_game(
        self,
        slug: str,
        *,
        include_evaluations: bool = False,
        validate: bool = False,
    ) -> ServiceResult:
        """One game: frontmatter, excerpt, body, HTML and table titles."""
        collection = self._library.collection
        try:
            doc = collection.get_by_slug_strict(
                slug, validate=validate, include_evaluations=include_evaluations
            )
        except DocumentNotFoundError as exc:
            return ServiceResult.failure("get_game", "NOT_FOUND", str(exc))
        except FrontmatterValidationError as exc:
            return ServiceResult.failure(
                "get_game",
                "INVALID_FRONTMATTER",
                str(exc),
                errors=[err.to_dict() for err in exc.errors],
            )

        related = collection.related(slug, same_opponent=True, same_season=False)
        data: dict[str, Any] = {
            "slug": doc.slug,
            "source": doc.source,
            "frontmatter": doc.frontmatter,
            "result": doc.outcome,
            "excerpt": doc.excerpt,
            "body": doc.raw_body,
            "html": doc.html,
            "tables": list_table_titles(doc.raw_body),
            "related": [other.slug for other in related],
        }
        return ServiceResult(ok=True, op="get_game", data=data)

    def record(
        self,
        *,
        season: int | None = None,
        opponent: str | None = None,
        game_type: str | None = None,
        home_away: str | None = None,
    ) -> ServiceResult:
        """Win/loss record and scoring averages for the filtered games."""
        filters = GameFilters(
            season=season, opponent=opponent, game_type=game_type, home_away=home_away
        )
        summary = self._library.collection.summary(filters)
        applied = {
            key: value
            for key, value in (
                ("season", season),
                ("opponent", opponent),
                ("game_type", game_type),
                ("home_away", home_away),
            )
            if value is not None
        }
        return ServiceResult(
            ok=True,
            op="record",
            data=summary.model_dump(),
            meta={"filters": applied},
        )

    def seasons(self) -> ServiceResult:
        values = self._library.collection.seasons()
        return ServiceResult(ok=True, op="seasons", data={"count": len(values), "items": values})

    def opponents(self) -> ServiceResult:
        values = self._library.collection.opponents()
        return ServiceResult(
            ok=True, op="opponents", data={"count": len(values), "items": values}
        )

    def slugs(self, *, include_evaluations: bool = False) -> ServiceResult:
        values = self._library.collection.slugs(include_evaluations=include_evaluations)
        return ServiceResult(ok=True, op="slugs", data={"count": len(values), "items": values})

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _find(self, op: str, slug: str) -> ParsedDocument | ServiceResult:
        doc = self._library.collection.get_by_slug(slug, validate=False)
        if doc is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"Game not found: {slug}")
        return doc

    def list_tables(self, slug: str) -> ServiceResult:
        """Titles of every heading-anchored table in the game body."""
        found = self._find("list_tables", slug)
        if isinstance(found, ServiceResult):
            return found
        titles = list_table_titles(found.raw_body)
        return ServiceResult(
            ok=True,
            op="list_tables",
            data={"slug": slug, "count": len(titles), "items": titles},
        )

    def get_table(self, slug: str, title: str) -> ServiceResult:
        """Typed rows of the table under heading *title*.

        A missing table is an empty result with a warning, not an error.
        """
        found = self._find("get_table", slug)
        if isinstance(found, ServiceResult):
            return found
        rows = extract_table(found.raw_body, title)
        warnings = [] if rows else [f"No table found under heading '{title}'"]
        return ServiceResult(
            ok=True,
            op="get_table",
            data={"slug": slug, "title": title, "rows": rows},
            warnings=warnings,
        )

    def get_team_tables(self, slug: str, section: str) -> ServiceResult:
        """Own and rival tables of a per-team section."""
        found = self._find("get_team_tables", slug)
        if isinstance(found, ServiceResult):
            return found
        teams = self._library.settings.teams
        tables = extract_team_section(
            found.raw_body,
            section,
            own_label=teams.own_label,
            rival_label=teams.rival_label,
        )
        warnings = []
        if not tables.own and not tables.rival:
            warnings.append(f"No team tables found in section '{section}'")
        return ServiceResult(
            ok=True,
            op="get_team_tables",
            data={
                "slug": slug,
                "section": section,
                "own_label": teams.own_label,
                "rival_label": teams.rival_label,
                "own": tables.own,
                "rival": tables.rival,
            },
            warnings=warnings,
        )
