"""Tests for frontmatter schema validation."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from gamestats.domain.frontmatter import (
    CANONICAL_KEY_ORDER,
    EvaluationFrontmatter,
    FrontmatterValidationError,
    StatsFrontmatter,
    game_outcome,
    is_evaluation,
    is_statistics,
    order_frontmatter,
    result_letter,
    validate_evaluation,
    validate_frontmatter,
    validate_frontmatter_strict,
    validate_stats,
)
from gamestats.domain.validation import format_validation_errors


def _stats(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "game_date": "2024-09-07",
        "opponent": "Appalachian State",
        "score": {"clemson": 66, "opponent": 20},
        "season": 2024,
        "game_type": "regular_season",
        "content_type": "statistics",
        "home_away": "home",
    }
    data.update(overrides)
    return data


def _messages(result: Any) -> list[str]:
    return [err.message for err in result.errors]


def _fields(result: Any) -> list[str | None]:
    return [err.field for err in result.errors]


class TestValidStats:
    def test_minimal(self) -> None:
        result = validate_frontmatter(_stats())
        assert result.valid is True
        assert isinstance(result.data, StatsFrontmatter)
        assert result.errors == []

    def test_data_matches_input(self) -> None:
        data = _stats(
            opponent_short="App State",
            location="Memorial Stadium",
            attendance=81500,
            weather="Clear, 78F",
            win_streak=1,
            slug="2024-09-07-appalachian-state",
        )
        result = validate_frontmatter(data)
        assert result.valid
        assert result.data is not None
        assert result.data.model_dump(exclude_none=True) == data

    def test_zero_scores_and_attendance(self) -> None:
        result = validate_stats(_stats(score={"clemson": 0, "opponent": 0}, attendance=0))
        assert result.valid

    def test_first_season(self) -> None:
        assert validate_stats(_stats(season=1896)).valid

    def test_next_season_allowed(self) -> None:
        assert validate_stats(_stats(season=date.today().year + 1)).valid

    def test_extra_keys_ignored(self) -> None:
        assert validate_stats(_stats(tags=["rivalry"])).valid


class TestValidEvaluation:
    def test_data_matches_input(self) -> None:
        data = _stats(content_type="evaluation", location="Memorial Stadium")
        result = validate_frontmatter(data)
        assert result.valid
        assert isinstance(result.data, EvaluationFrontmatter)
        assert result.data.model_dump(exclude_none=True) == data

    def test_direct_validator(self) -> None:
        assert validate_evaluation(_stats(content_type="evaluation")).valid

    def test_evaluation_validator_rejects_statistics_tag(self) -> None:
        result = validate_evaluation(_stats())
        assert not result.valid
        assert "content_type" in _fields(result)


class TestInvalidFields:
    def test_season_too_early_mentions_first_season(self) -> None:
        result = validate_frontmatter(_stats(season=1895))
        assert not result.valid
        assert _fields(result) == ["season"]
        assert "1896" in result.errors[0].message

    def test_season_too_far_in_future(self) -> None:
        result = validate_frontmatter(_stats(season=date.today().year + 2))
        assert not result.valid
        assert "future" in result.errors[0].message

    def test_negative_score(self) -> None:
        result = validate_frontmatter(_stats(score={"clemson": -1, "opponent": 20}))
        assert not result.valid
        assert _fields(result) == ["score.clemson"]
        assert result.errors[0].path == ("score", "clemson")
        assert "non-negative" in result.errors[0].message

    def test_non_integer_score(self) -> None:
        result = validate_frontmatter(_stats(score={"clemson": "66", "opponent": 20}))
        assert not result.valid
        assert "score.clemson" in _fields(result)

    def test_missing_score_side(self) -> None:
        result = validate_frontmatter(_stats(score={"clemson": 66}))
        assert not result.valid
        assert "score.opponent" in _fields(result)

    def test_bad_date_format(self) -> None:
        result = validate_frontmatter(_stats(game_date="09/07/2024"))
        assert not result.valid
        assert _fields(result) == ["game_date"]
        assert "YYYY-MM-DD" in result.errors[0].message

    def test_impossible_calendar_date(self) -> None:
        result = validate_frontmatter(_stats(game_date="2024-13-40"))
        assert not result.valid
        message = result.errors[0].message
        assert "valid date" in message
        assert "YYYY-MM-DD" not in message

    def test_empty_opponent(self) -> None:
        result = validate_frontmatter(_stats(opponent="   "))
        assert not result.valid
        assert _fields(result) == ["opponent"]

    def test_bad_enum(self) -> None:
        result = validate_frontmatter(_stats(game_type="exhibition", home_away="road"))
        assert not result.valid
        assert sorted(f for f in _fields(result) if f) == ["game_type", "home_away"]

    def test_negative_attendance(self) -> None:
        result = validate_stats(_stats(attendance=-5))
        assert not result.valid
        assert _fields(result) == ["attendance"]

    def test_every_failing_field_reported(self) -> None:
        data = _stats(season=1800, opponent="", game_date="bad")
        data.pop("home_away")
        result = validate_frontmatter(data)
        assert set(_fields(result)) == {"season", "opponent", "game_date", "home_away"}

    def test_missing_field_value_not_recorded(self) -> None:
        data = _stats()
        data.pop("season")
        result = validate_frontmatter(data)
        assert result.errors[0].field == "season"
        assert result.errors[0].value is None


class TestDiscriminant:
    def test_unknown_content_type(self) -> None:
        result = validate_frontmatter(_stats(content_type="preview"))
        assert not result.valid
        assert result.errors[0].field == "content_type"
        assert "'statistics'" in result.errors[0].message
        assert result.errors[0].value == "preview"

    def test_missing_content_type_reports_common_errors_too(self) -> None:
        data = _stats(season=1700)
        data.pop("content_type")
        result = validate_frontmatter(data)
        assert _fields(result) == ["content_type", "season"]

    def test_not_a_mapping(self) -> None:
        result = validate_frontmatter(["not", "a", "mapping"])
        assert not result.valid
        assert "mapping" in result.errors[0].message


class TestStrict:
    def test_returns_model(self) -> None:
        model = validate_frontmatter_strict(_stats())
        assert is_statistics(model)
        assert not is_evaluation(model)
        assert model.score.clemson == 66

    def test_raises_with_all_errors(self) -> None:
        with pytest.raises(FrontmatterValidationError) as excinfo:
            validate_frontmatter_strict(_stats(season=1800, opponent=""))
        err = excinfo.value
        assert len(err.errors) == 2
        text = str(err)
        assert text.startswith("Frontmatter validation failed:")
        assert "season" in text
        assert "opponent" in text
        assert isinstance(err, ValueError)


class TestOrdering:
    def test_canonical_first_then_alphabetical(self) -> None:
        fm = {"zeta": 1, "slug": "s", "alpha": 2, "season": 2024, "game_date": "2024-09-07"}
        assert list(order_frontmatter(fm)) == ["game_date", "season", "slug", "alpha", "zeta"]

    def test_none_values_dropped(self) -> None:
        assert order_frontmatter({"opponent": "Duke", "weather": None}) == {"opponent": "Duke"}

    def test_to_frontmatter_uses_canonical_order(self) -> None:
        model = validate_frontmatter_strict(_stats(location="Memorial Stadium"))
        keys = list(model.to_frontmatter())
        expected = [key for key in CANONICAL_KEY_ORDER if key in keys]
        assert keys == expected


class TestOutcome:
    @pytest.mark.parametrize(
        ("own", "rival", "outcome", "letter"),
        [(66, 20, "win", "W"), (14, 17, "loss", "L"), (24, 24, "tie", "T")],
    )
    def test_outcome(self, own: int, rival: int, outcome: str, letter: str) -> None:
        assert game_outcome(own, rival) == outcome
        assert result_letter(own, rival) == letter


class TestFormatErrors:
    def test_numbered(self) -> None:
        result = validate_frontmatter(_stats(season=1800, opponent=""))
        text = format_validation_errors(result.errors)
        assert text.startswith("1. [")
        assert "\n2. [" in text

    def test_no_errors(self) -> None:
        assert format_validation_errors([]) == "No errors"
