"""The envelope every service method returns.

Commands never see engine outcomes or exceptions directly: each service
call produces a :class:`ServiceResult`, which the output layer renders as
text, IDs, or JSON.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed: a stable ``code`` plus human-readable text."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False exactly when ``error`` is set.
        op: Operation name used for rendering (``"path"``, ``"connect"``...).
        data: Payload of a successful call.
        warnings: Problems that did not stop the operation, such as a
            plugin failure or an unsaved data file.
        error: Set on failure.
        meta: Extra diagnostics; ``meta["telemetry"]`` under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def fail(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result; keyword arguments become ``error.detail``."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=str(code), message=message, detail=detail),
        )
