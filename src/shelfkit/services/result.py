"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All mutating service methods return ServiceResult.
Recoverable outcomes (validation, duplicates, not found) are reported
here, never raised.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for catalog operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_book"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def fail(cls, op: str, error_code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for a failed result carrying a single error.

        Keyword arguments become ``error.detail``; any name is allowed,
        including ``code``.
        """
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=error_code, message=message, detail=detail),
        )
