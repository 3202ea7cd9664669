"""ServiceResult and ServiceError: the universal command contract.

INVARIANT: Every StateModel command returns a ServiceResult.
Validation failures are results, never exceptions; the CLI and any other
render layer consume this type to show inline messages.
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
    """Tagged success/failure value for all commands.

    Attributes:
        ok: Whether the command succeeded.
        op: Name of the command (e.g. ``"add_category"``).
        data: Command-specific payload on success (e.g. the new ``id``).
        warnings: Non-fatal issues (e.g. state not durably saved).
        error: Structured reason if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any] | None = None,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {}, warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
