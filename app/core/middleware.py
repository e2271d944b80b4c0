"""HTTP middleware for request correlation and response hardening.

request_id_middleware:
- Accepts incoming X-Request-ID header or generates a UUID
- Stores request_id in contextvars for log correlation
- Echoes request_id and total duration in response headers
- Clears context after request completion to prevent context leaks

security_headers_middleware:
- Adds HSTS, nosniff, frame-deny, XSS and CSP headers to every response

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.logging import clear_request_id, set_request_id

SECURITY_HEADERS: dict[str, str] = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'self'; script-src 'self'; object-src 'none';",
}


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate a correlation id through the request lifecycle.

    If the client provides the configured request id header
    (``LOG_REQUEST_ID_HEADER``, default X-Request-ID) that value is used,
    otherwise a new UUID is generated.

    Side Effects:
        - Sets request_id in contextvars (accessible via get_request_id())
        - Clears request_id from contextvars after request completes
        - Adds the request id header and X-Request-Duration-ms to the response
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    """Attach the static security headers unless disabled in settings."""

    response: Response = await call_next(request)
    if settings.app.security_headers_enabled:
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
    return response
