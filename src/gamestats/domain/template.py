"""Template structure enforcement for game documents.

A reference document defines the expected shape of its directory: every
frontmatter key path (nested mappings recursed, lists not) and every
section heading. Other documents are linted against it:

- template key path absent from the document -> error
- document key path absent from the template -> warning
- template heading absent from the document -> error

This is a consistency check run over a directory, not part of parsing.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gamestats.domain.content import FrontmatterParseError, parse_frontmatter
from gamestats.domain.validation import SEVERITY_WARNING, ValidationError

if TYPE_CHECKING:
    from gamestats.infrastructure.sources import ContentSource

_HEADER_LINE = re.compile(r"^#{1,6}[ \t]+(.+)$", re.MULTILINE)


class TemplateError(Exception):
    """A template document could not be read or parsed."""


@dataclass(frozen=True)
class TemplateStructure:
    """Expected frontmatter key paths and section headers."""

    required_fields: list[str]
    frontmatter_schema: dict[str, Any] = field(default_factory=dict)
    section_headers: list[str] = field(default_factory=list)


def extract_section_headers(text: str) -> list[str]:
    """Return every heading's text in document order (duplicates kept)."""
    return [match.group(1).strip() for match in _HEADER_LINE.finditer(text)]


def key_paths(obj: Any, prefix: str = "") -> list[str]:
    """Dot-joined key paths of *obj*, recursing into mappings but not lists.

    Examples:
        >>> key_paths({"score": {"clemson": 1, "opponent": 2}, "tags": [{"a": 1}]})
        ['score', 'score.clemson', 'score.opponent', 'tags']
    """
    if not isinstance(obj, Mapping):
        return []
    paths: list[str] = []
    for key, value in obj.items():
        full = f"{prefix}.{key}" if prefix else str(key)
        paths.append(full)
        if isinstance(value, Mapping):
            paths.extend(key_paths(value, full))
    return paths


def have_same_structure(a: Any, b: Any) -> bool:
    """True when *a* and *b* have identical sorted key-path lists."""
    return sorted(key_paths(a)) == sorted(key_paths(b))


def template_from_text(text: str) -> TemplateStructure:
    """Build a :class:`TemplateStructure` from a document's text.

    Raises:
        FrontmatterParseError: If the frontmatter block is malformed.
    """
    fm, body = parse_frontmatter(text)
    return TemplateStructure(
        required_fields=key_paths(fm),
        frontmatter_schema=fm,
        section_headers=extract_section_headers(body),
    )


def load_template_structure(path: Path | str) -> TemplateStructure:
    """Load the template structure from the reference document at *path*.

    Raises:
        TemplateError: If the file cannot be read or parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Failed to read template file {path}: {exc}"
        raise TemplateError(msg) from exc
    try:
        return template_from_text(text)
    except FrontmatterParseError as exc:
        msg = f"Failed to parse template file {path}: {exc}"
        raise TemplateError(msg) from exc


def check_against_template(text: str, template: TemplateStructure) -> list[ValidationError]:
    """Compare a document's text with *template*; see module docstring."""
    try:
        fm, body = parse_frontmatter(text)
    except FrontmatterParseError as exc:
        return [ValidationError(message=f"Failed to parse file: {exc}")]

    errors: list[ValidationError] = []
    doc_fields = key_paths(fm)
    doc_field_set = set(doc_fields)
    for required in template.required_fields:
        if required not in doc_field_set:
            errors.append(
                ValidationError(
                    field=required,
                    message=f"Missing required frontmatter field: {required}",
                    path=tuple(required.split(".")),
                )
            )

    template_fields = set(template.required_fields)
    for extra in doc_fields:
        if extra not in template_fields:
            errors.append(
                ValidationError(
                    field=extra,
                    message=f"Extra frontmatter field not in template: {extra}",
                    path=tuple(extra.split(".")),
                    severity=SEVERITY_WARNING,
                )
            )

    headers = set(extract_section_headers(body))
    for header in template.section_headers:
        if header not in headers:
            errors.append(
                ValidationError(
                    field="content",
                    message=f'Missing required section header: "{header}"',
                )
            )
    return errors


def validate_against_template(
    path: Path | str, template: TemplateStructure
) -> list[ValidationError]:
    """Check the file at *path* against *template*.

    Read failures short-circuit into a single error.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return [ValidationError(message=f"Failed to read file: {exc}")]
    return check_against_template(text, template)


def validate_files_against_template(
    paths: list[Path], template: TemplateStructure
) -> dict[str, list[ValidationError]]:
    """Check several files; only files with findings appear in the result."""
    results: dict[str, list[ValidationError]] = {}
    for path in paths:
        errors = validate_against_template(path, template)
        if errors:
            results[str(path)] = errors
    return results


def validate_directory_with_template(
    source: ContentSource,
    template_name: str | None = None,
) -> dict[str, list[ValidationError]]:
    """Use one document of *source* as the template and check the others.

    The named document (or the first one) is the template and is not
    checked against itself. Listing or template failures come back as a
    single error keyed by the source (or template) name.
    """
    try:
        names = source.list_documents()
    except OSError as exc:
        return {source.label: [ValidationError(message=f"Failed to read directory: {exc}")]}

    if not names:
        return {}

    if template_name is not None:
        if template_name not in names:
            return {
                source.label: [ValidationError(message=f"Template file not found: {template_name}")]
            }
        reference = template_name
    else:
        reference = names[0]

    try:
        template = template_from_text(source.read(reference))
    except (OSError, UnicodeDecodeError, FrontmatterParseError) as exc:
        return {
            source.describe(reference): [ValidationError(message=f"Failed to load template: {exc}")]
        }

    results: dict[str, list[ValidationError]] = {}
    for name in names:
        if name == reference:
            continue
        try:
            text = source.read(name)
        except (OSError, UnicodeDecodeError) as exc:
            errors = [ValidationError(message=f"Failed to read file: {exc}")]
        else:
            errors = check_against_template(text, template)
        if errors:
            results[source.describe(name)] = errors
    return results


def format_template_report(results: Mapping[str, list[ValidationError]]) -> str:
    """Human-readable report for :func:`validate_directory_with_template`."""
    if not results:
        return "All files match the template structure"

    lines = ["Template validation errors found:", ""]
    for name, errors in results.items():
        lines.append(f"{name}:")
        for err in errors:
            prefix = f"[{err.field}] " if err.field else ""
            lines.append(f"  - {prefix}{err.message}")
    return "\n".join(lines)
