"""ServiceResult and ServiceError — the service contract.

INVARIANT: Every service-layer method returns ServiceResult. The CLI (and
any HTTP handler wrapping the export surface) consumes this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``detail`` may carry an HTTP-style ``status`` for web adapters.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"list_games"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues, such as documents that failed to parse.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, applied filters).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        """Shorthand for an ``ok=False`` result."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
