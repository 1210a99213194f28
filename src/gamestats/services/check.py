"""CheckService — content linting.

Linter pattern: checks report issues and never modify files. Two
categories:

- template structure: every game document against a reference document
  (from the templates directory, or the first game when none exists)
- frontmatter schema: every game document against its content type's schema

Issues are plain dicts with ``category``, ``severity``, ``source``,
``field`` and ``message``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gamestats.domain.content import DocumentError, FrontmatterParseError, parse_frontmatter
from gamestats.domain.frontmatter import validate_frontmatter
from gamestats.domain.template import (
    TemplateStructure,
    check_against_template,
    template_from_text,
    validate_directory_with_template,
)
from gamestats.domain.validation import SEVERITY_ERROR, SEVERITY_WARNING, ValidationError
from gamestats.services.base import BaseService
from gamestats.services.result import ServiceResult

if TYPE_CHECKING:
    from gamestats.infrastructure.sources import ContentSource

CAT_TEMPLATE = "template_structure"
CAT_SCHEMA = "frontmatter_schema"
CAT_PARSE = "parse"


def _issue(category: str, source: str, err: ValidationError) -> dict[str, Any]:
    return {
        "category": category,
        "severity": err.severity,
        "source": source,
        "field": err.field,
        "message": err.message,
    }


def _tally(op: str, issues: list[dict[str, Any]], checked: int, **meta: Any) -> ServiceResult:
    errors = sum(1 for issue in issues if issue["severity"] == SEVERITY_ERROR)
    warnings = sum(1 for issue in issues if issue["severity"] == SEVERITY_WARNING)
    return ServiceResult(
        ok=True,
        op=op,
        data={
            "issues": issues,
            "count": len(issues),
            "errors": errors,
            "warnings": warnings,
            "checked": checked,
        },
        meta=meta or None,
    )


class CheckService(BaseService):
    """Template and schema checks over the content directories."""

    def _sources(self, include_evaluations: bool) -> list[ContentSource]:
        sources = [self._library.games]
        if include_evaluations:
            sources.append(self._library.evaluations)
        return sources

    # ------------------------------------------------------------------
    # Template structure
    # ------------------------------------------------------------------

    def check_template(
        self,
        *,
        template_name: str | None = None,
        include_evaluations: bool = False,
    ) -> ServiceResult:
        """Compare documents with a reference template.

        The reference is *template_name* (or the first document) of the
        templates directory. Without templates, the first game document is
        the reference and the rest of the games directory is checked, plus
        the evaluations directory when *include_evaluations* is set.
        """
        op = "check_template"
        templates = self._library.templates
        names = templates.list_documents()

        if not names:
            if template_name is not None:
                return ServiceResult.failure(
                    op,
                    "TEMPLATE_NOT_FOUND",
                    f"Template file not found: {template_name}",
                    templates=templates.label,
                )
            games = self._library.games
            results = validate_directory_with_template(games)
            issues = [
                _issue(CAT_TEMPLATE, source, err)
                for source, errors in results.items()
                for err in errors
            ]
            game_names = games.list_documents()
            checked = max(len(game_names) - 1, 0)
            if include_evaluations and game_names:
                evaluations = self._library.evaluations
                first: TemplateStructure | None
                try:
                    first = template_from_text(games.read(game_names[0]))
                except (OSError, UnicodeDecodeError, FrontmatterParseError):
                    # Already reported against the games directory.
                    first = None
                if first is not None:
                    for name in evaluations.list_documents():
                        checked += 1
                        issues.extend(self._check_one(evaluations, name, first))
            return _tally(op, issues, checked, template="(first game document)")

        reference = template_name or names[0]
        if reference not in names:
            return ServiceResult.failure(
                op,
                "TEMPLATE_NOT_FOUND",
                f"Template file not found: {reference}",
                templates=templates.label,
            )

        try:
            template = template_from_text(templates.read(reference))
        except (OSError, UnicodeDecodeError, FrontmatterParseError) as exc:
            return ServiceResult.failure(
                op,
                "TEMPLATE_ERROR",
                f"Failed to load template {templates.describe(reference)}: {exc}",
            )

        issues: list[dict[str, Any]] = []
        checked = 0
        for source in self._sources(include_evaluations):
            for name in source.list_documents():
                checked += 1
                issues.extend(self._check_one(source, name, template))
        return _tally(op, issues, checked, template=templates.describe(reference))

    @staticmethod
    def _check_one(
        source: ContentSource, name: str, template: TemplateStructure
    ) -> list[dict[str, Any]]:
        where = source.describe(name)
        try:
            text = source.read(name)
        except (OSError, UnicodeDecodeError) as exc:
            err = ValidationError(message=f"Failed to read file: {exc}")
            return [_issue(CAT_TEMPLATE, where, err)]
        return [_issue(CAT_TEMPLATE, where, err) for err in check_against_template(text, template)]

    # ------------------------------------------------------------------
    # Frontmatter schema
    # ------------------------------------------------------------------

    def check_schema(self, *, include_evaluations: bool = False) -> ServiceResult:
        """Validate every document's frontmatter against its schema."""
        issues: list[dict[str, Any]] = []
        checked = 0
        for source in self._sources(include_evaluations):
            for name in source.list_documents():
                checked += 1
                where = source.describe(name)
                try:
                    text = source.read(name)
                except (OSError, UnicodeDecodeError) as exc:
                    err = ValidationError(message=f"Failed to read file: {exc}")
                    issues.append(_issue(CAT_PARSE, where, err))
                    continue
                try:
                    fm, _ = parse_frontmatter(text)
                except DocumentError as exc:
                    issues.append(_issue(CAT_PARSE, where, ValidationError(message=str(exc))))
                    continue
                result = validate_frontmatter(fm)
                issues.extend(_issue(CAT_SCHEMA, where, err) for err in result.errors)
        return _tally("check_schema", issues, checked)

    # ------------------------------------------------------------------
    # Combined
    # ------------------------------------------------------------------

    def check(
        self,
        *,
        template_name: str | None = None,
        include_evaluations: bool = False,
    ) -> ServiceResult:
        """Run the schema and template checks together."""
        schema = self.check_schema(include_evaluations=include_evaluations)
        template = self.check_template(
            template_name=template_name, include_evaluations=include_evaluations
        )
        if not template.ok:
            return template

        issues = [*schema.data["issues"], *template.data["issues"]]
        return _tally("check", issues, schema.data["checked"], **(template.meta or {}))
