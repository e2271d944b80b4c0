"""Response envelopes shared by every endpoint.

Success: ``{"ok": true, "data": ...}``
Failure: ``{"ok": false, "error": {"code", "message", "request_id", "details"?}}``
(failures are rendered by app.core.exception_handlers.build_failure).
"""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Ok(BaseModel, Generic[T]):
    ok: Literal[True] = True
    data: T


class ErrorBody(BaseModel):
    code: str = Field(..., description="Stable machine-readable error code.")
    message: str
    request_id: str | None = None
    details: dict[str, Any] | None = None


class Fail(BaseModel):
    ok: Literal[False] = False
    error: ErrorBody


def ok(data: T) -> Ok[T]:
    return Ok(data=data)
