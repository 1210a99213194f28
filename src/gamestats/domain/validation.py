"""Validation result types shared by the schema and template checks.

Validation never raises per field: findings accumulate as
:class:`ValidationError` records and are either returned in a
:class:`ValidationResult` or joined into one exception by strict callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationError:
    """One field-level (or document-level) validation finding."""

    message: str
    field: str | None = None
    path: tuple[str, ...] = ()
    value: Any = None
    severity: Severity = SEVERITY_ERROR

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message, "severity": self.severity}
        if self.field is not None:
            data["field"] = self.field
        if self.path:
            data["path"] = list(self.path)
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class ValidationResult[T]:
    """Typed data on success, or a non-empty list of errors on failure."""

    valid: bool
    data: T | None = None
    errors: list[ValidationError] = field(default_factory=list)


def format_validation_errors(errors: list[ValidationError]) -> str:
    """Format errors as a numbered list for display."""
    if not errors:
        return "No errors"
    lines: list[str] = []
    for idx, err in enumerate(errors, start=1):
        prefix = f"[{err.field}] " if err.field else ""
        lines.append(f"{idx}. {prefix}{err.message}")
    return "\n".join(lines)
