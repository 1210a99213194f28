"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import json

import pytest

from gamestats.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="seasons")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("export", "NOT_FOUND", "Game not found: x", status=404)
        assert result.ok is False
        assert result.error == ServiceError(
            code="NOT_FOUND", message="Game not found: x", detail={"status": 404}
        )

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="seasons")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

    def test_json_serializable(self) -> None:
        result = ServiceResult(ok=True, op="get_table", data={"rows": [{"a": 1, "b": "5-40"}]})
        payload = json.loads(result.model_dump_json())
        assert payload["data"]["rows"] == [{"a": 1, "b": "5-40"}]
