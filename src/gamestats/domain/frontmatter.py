"""Frontmatter schema models for game documents.

Two variants share one base record and are discriminated by
``content_type``:

- ``statistics``: box-score documents (adds attendance, weather, win_streak).
- ``evaluation``: written game evaluations (no extra fields).

Validation dispatches on the discriminant first, then applies the variant's
schema. Every field is checked; one error is reported per failing field.

Canonical key ordering for rendered frontmatter:
  game_date, opponent, opponent_short, score, season, game_type,
  content_type, home_away, location, attendance, weather, win_streak, slug
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date
from typing import Annotated, Any, Literal, TypeGuard

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from gamestats.domain.slugs import to_iso_date
from gamestats.domain.validation import ValidationError, ValidationResult

# Clemson football started in 1896.
FIRST_SEASON = 1896

GameType = Literal["regular_season", "bowl", "playoff", "championship"]
HomeAway = Literal["home", "away", "neutral"]
ContentType = Literal["statistics", "evaluation"]
Outcome = Literal["win", "loss", "tie"]

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

CANONICAL_KEY_ORDER: list[str] = [
    "game_date",
    "opponent",
    "opponent_short",
    "score",
    "season",
    "game_type",
    "content_type",
    "home_away",
    "location",
    "attendance",
    "weather",
    "win_streak",
    "slug",
]


def order_frontmatter(fm: Mapping[str, Any]) -> dict[str, Any]:
    """Return *fm* with keys in canonical order.

    Keys present in :data:`CANONICAL_KEY_ORDER` come first (in that
    order), followed by any remaining keys sorted alphabetically.
    ``None`` values are omitted.
    """
    ordered: dict[str, Any] = {}
    for key in CANONICAL_KEY_ORDER:
        if key in fm and fm[key] is not None:
            ordered[key] = fm[key]

    for key in sorted(fm.keys()):
        if key not in ordered and fm[key] is not None:
            ordered[key] = fm[key]

    return ordered


# ---------------------------------------------------------------------------
# Schema models
# ---------------------------------------------------------------------------


class GameScore(BaseModel):
    """Final score, keyed by side."""

    model_config = {"frozen": True}

    clemson: StrictInt
    opponent: StrictInt

    @field_validator("clemson", "opponent")
    @classmethod
    def _non_negative(cls, value: int, info: ValidationInfo) -> int:
        if value < 0:
            raise PydanticCustomError(
                "negative_score",
                "{side} score must be a non-negative integer",
                {"side": str(info.field_name).capitalize()},
            )
        return value


class GameRecordBase(BaseModel):
    """Fields shared by every frontmatter variant."""

    model_config = {"frozen": True}

    game_date: StrictStr
    opponent: StrictStr
    opponent_short: StrictStr | None = None
    score: GameScore
    season: StrictInt
    game_type: GameType
    home_away: HomeAway
    location: StrictStr | None = None
    slug: StrictStr | None = None

    @field_validator("game_date")
    @classmethod
    def _check_game_date(cls, value: str) -> str:
        # Format and calendar validity are independent checks: "2024-13-40"
        # passes the first and fails the second.
        problems: list[str] = []
        if _DATE_PATTERN.fullmatch(value) is None:
            problems.append("game_date must be in YYYY-MM-DD format")
        try:
            to_iso_date(value)
        except ValueError:
            problems.append("game_date must be a valid date")
        if problems:
            raise PydanticCustomError("invalid_game_date", "; ".join(problems))
        return value

    @field_validator("opponent")
    @classmethod
    def _check_opponent(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(
                "empty_opponent", "opponent is required and cannot be empty"
            )
        return value

    @field_validator("season")
    @classmethod
    def _check_season(cls, value: int) -> int:
        if value < FIRST_SEASON:
            raise PydanticCustomError(
                "season_too_early",
                "season must be {first} or later",
                {"first": FIRST_SEASON},
            )
        if value > date.today().year + 1:
            raise PydanticCustomError(
                "season_too_late", "season cannot be more than one year in the future"
            )
        return value

    def to_frontmatter(self) -> dict[str, Any]:
        """Serialize to an ordered frontmatter dict (``None`` values dropped)."""
        return order_frontmatter(self.model_dump(mode="json", exclude_none=True))


class StatsFrontmatter(GameRecordBase):
    """Frontmatter for ``content_type: statistics`` documents."""

    content_type: Literal["statistics"]
    attendance: Annotated[StrictInt, Field(ge=0)] | None = None
    weather: StrictStr | None = None
    win_streak: Annotated[StrictInt, Field(ge=0)] | None = None


class EvaluationFrontmatter(GameRecordBase):
    """Frontmatter for ``content_type: evaluation`` documents."""

    content_type: Literal["evaluation"]


type GameFrontmatter = StatsFrontmatter | EvaluationFrontmatter

FRONTMATTER_VARIANTS: dict[str, type[StatsFrontmatter] | type[EvaluationFrontmatter]] = {
    "statistics": StatsFrontmatter,
    "evaluation": EvaluationFrontmatter,
}


class FrontmatterValidationError(ValueError):
    """Raised by strict validation; carries every collected error."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        lines = [f"  - {err.field}: {err.message}" for err in errors] or ["  - Unknown error"]
        super().__init__("Frontmatter validation failed:\n" + "\n".join(lines))


# ---------------------------------------------------------------------------
# Validation entry points
# ---------------------------------------------------------------------------


def errors_from_pydantic(exc: PydanticValidationError) -> list[ValidationError]:
    """Convert a pydantic error list into :class:`ValidationError` records."""
    errors: list[ValidationError] = []
    for issue in exc.errors():
        path = tuple(str(part) for part in issue["loc"])
        errors.append(
            ValidationError(
                field=".".join(path) or None,
                message=issue["msg"],
                path=path,
                value=None if issue["type"] == "missing" else issue.get("input"),
            )
        )
    return errors


def _validate[M: GameRecordBase](model: type[M], data: Any) -> ValidationResult[M]:
    if not isinstance(data, Mapping):
        return ValidationResult(
            valid=False,
            errors=[ValidationError(message="Frontmatter must be a mapping", value=data)],
        )
    try:
        instance = model.model_validate(dict(data))
    except PydanticValidationError as exc:
        return ValidationResult(valid=False, errors=errors_from_pydantic(exc))
    return ValidationResult(valid=True, data=instance)


def validate_stats(data: Any) -> ValidationResult[StatsFrontmatter]:
    """Validate *data* as statistics frontmatter."""
    return _validate(StatsFrontmatter, data)


def validate_evaluation(data: Any) -> ValidationResult[EvaluationFrontmatter]:
    """Validate *data* as evaluation frontmatter."""
    return _validate(EvaluationFrontmatter, data)


def validate_frontmatter(data: Any) -> ValidationResult[GameFrontmatter]:
    """Validate *data* against the variant named by its ``content_type``.

    An unknown or missing discriminant is reported alongside every
    common-field error, so authors see all problems at once.
    """
    if not isinstance(data, Mapping):
        return _validate(GameRecordBase, data)  # type: ignore[return-value]

    tag = data.get("content_type")
    model = FRONTMATTER_VARIANTS.get(tag) if isinstance(tag, str) else None
    if model is not None:
        return _validate(model, data)  # type: ignore[return-value]

    expected = ", ".join(repr(name) for name in FRONTMATTER_VARIANTS)
    tag_error = ValidationError(
        field="content_type",
        message=f"content_type must be one of {expected}",
        path=("content_type",),
        value=tag,
    )
    base = _validate(GameRecordBase, data)
    return ValidationResult(valid=False, errors=[tag_error, *base.errors])


def validate_frontmatter_strict(data: Any) -> GameFrontmatter:
    """Validate *data* and return the typed model.

    Raises:
        FrontmatterValidationError: With all field errors newline-joined.
    """
    result = validate_frontmatter(data)
    if not result.valid or result.data is None:
        raise FrontmatterValidationError(result.errors)
    return result.data


def is_statistics(fm: GameFrontmatter) -> TypeGuard[StatsFrontmatter]:
    return fm.content_type == "statistics"


def is_evaluation(fm: GameFrontmatter) -> TypeGuard[EvaluationFrontmatter]:
    return fm.content_type == "evaluation"


# ---------------------------------------------------------------------------
# Game outcome
# ---------------------------------------------------------------------------


def game_outcome(own: int, rival: int) -> Outcome:
    """Win, loss, or tie from the program's point of view."""
    if own > rival:
        return "win"
    if own < rival:
        return "loss"
    return "tie"


def result_letter(own: int, rival: int) -> str:
    """``W``/``L``/``T`` for export columns."""
    return {"win": "W", "loss": "L", "tie": "T"}[game_outcome(own, rival)]
