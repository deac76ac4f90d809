"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult. Expected
failures are never raised; they come back as ``ok=False`` with one of the
:class:`ErrorCode` values so any transport can map them to its own
status codes.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Failure kinds a service operation can report."""

    FORBIDDEN_NAME = "FORBIDDEN_NAME"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    NOT_FOUND = "NOT_FOUND"
    PRIMARY_REMOVAL_FORBIDDEN = "PRIMARY_REMOVAL_FORBIDDEN"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_alias"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (attempt counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def failure(op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
    """Build an ``ok=False`` result for *op*."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code.value, message=message, detail=detail),
    )
