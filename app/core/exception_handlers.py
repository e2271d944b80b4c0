"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain, framework and unexpected) and return the failure envelope:

    {"ok": false, "error": {"code": ..., "message": ..., "request_id": ...}}

Design:
- AppError subclasses → appropriate HTTP status (400, 403, 404, 409, 415, 429, 502)
- Request body/param validation → 400 bad_request
- Starlette HTTP errors (unknown route, wrong method) → same envelope
- Unexpected Exception → generic 500 (safety net)
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    ConflictAppError,
    NotFoundAppError,
    PaymentAppError,
    RateLimitedAppError,
    UnsupportedMediaTypeAppError,
)
from app.core.http import unsupported_media_type, violates_json_content_type
from app.core.logging import get_request_id
from app.core.rate_limit import recorded_quota_headers

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "bad_request",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    415: "unsupported_media_type",
    429: "rate_limited",
}


def build_failure(code: str, message: str, details: Any = None) -> dict[str, Any]:
    """Build the failure envelope shared by every error response."""
    error_content: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    # Include details only if present (optional structured context)
    if details:
        error_content["details"] = details
    return {"ok": False, "error": error_content}


def _status_for(exc: AppError) -> int:
    status_code = 400  # Default: client error
    if isinstance(exc, AuthenticationAppError):
        status_code = 403
    elif isinstance(exc, NotFoundAppError):
        status_code = 404
    elif isinstance(exc, ConflictAppError):
        status_code = 409
    elif isinstance(exc, UnsupportedMediaTypeAppError):
        status_code = 415
    elif isinstance(exc, RateLimitedAppError):
        status_code = 429
    elif isinstance(exc, PaymentAppError):
        status_code = 502
    return status_code


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    headers = recorded_quota_headers(request)
    if isinstance(exc, RateLimitedAppError):
        headers.update(exc.headers())
    return JSONResponse(
        status_code=status_code,
        content=build_failure(exc.code, exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map pydantic/FastAPI input validation failures to 400 bad_request.

    A body that could not be decoded and was not declared as JSON is a
    media type problem, so it gets the same 415 as ``require_json``.
    """
    errors = exc.errors()
    if violates_json_content_type(request) and any(
        err.get("type") == "json_invalid" for err in errors
    ):
        return await app_error_handler(request, unsupported_media_type())

    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in errors
    ]
    logger.info(
        "request_validation_failed",
        extra={"request_path": request.url.path, "error_count": len(fields)},
    )
    message = fields[0]["message"] if fields else "Invalid request"
    return JSONResponse(
        status_code=400,
        content=build_failure("bad_request", message, {"fields": fields}),
        headers=recorded_quota_headers(request),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (404 route miss, 405 method) in the envelope."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return JSONResponse(
        status_code=exc.status_code,
        content=build_failure(code, message),
        headers={**recorded_quota_headers(request), **(getattr(exc, "headers", None) or {})},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic
    message. No stack traces reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=build_failure("internal_error", "Internal server error"),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization, before route registration.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
