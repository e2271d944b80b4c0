"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    hint: str
    field: str
    fields: list[dict[str, Any]]
    user_id: int
    provider: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class NotFoundAppError(AppError):
    """Raised when a requested resource does not exist."""


class ConflictAppError(AppError):
    """Raised when a write collides with existing state (e.g. duplicate email)."""


class UnsupportedMediaTypeAppError(AppError):
    """Raised when a request body is not sent as application/json."""


class PaymentAppError(AppError):
    """Raised when the payment provider call fails."""


@dataclass
class RateLimitedAppError(AppError):
    """Raised when a request is throttled by the rate limiter.

    Carries the quota telemetry so the handler can set the
    X-RateLimit-* and Retry-After headers on the 429 response.
    """

    limit: int = 0
    retry_after: int = 1

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
            "Retry-After": str(self.retry_after),
        }
