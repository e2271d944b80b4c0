"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes declare ``Depends(rate_limit(...))`` only.
- Swap-friendly: the limiter lives on ``app.state`` behind an abstract
  interface, so the store can be replaced (e.g., Redis).
- Kill switch: ``APP_RATE_LIMIT_ENABLED=false`` turns every guard into a no-op.

Rate limiting strategy:
- Sliding window per client IP and endpoint scope.
- Scope is the explicit ``key`` when given, otherwise the request path.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitOptions
from app.core.client_identity import client_ip_from_request
from app.core.config import settings
from app.core.errors import RateLimitedAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests"

# Attribute on request.state holding the quota headers of an admitted request
QUOTA_STATE_ATTR = "rate_limit_headers"


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.rate_limiter


def quota_headers(limit: int, remaining: int) -> dict[str, str]:
    return {"X-RateLimit-Limit": str(limit), "X-RateLimit-Remaining": str(remaining)}


def annotate_response(response: Response, *, limit: int, remaining: int) -> None:
    """Set the quota headers for an admitted request."""
    response.headers.update(quota_headers(limit, remaining))


def recorded_quota_headers(request: Request) -> dict[str, str]:
    """Return the quota headers recorded for this request, if it was admitted.

    The injected ``Response`` is discarded when the route raises, so error
    handlers use this to keep the headers on 4xx/5xx responses.
    """
    return dict(getattr(request.state, QUOTA_STATE_ATTR, None) or {})


def rate_limit(
    limit: int,
    window_ms: int,
    key: str | None = None,
) -> Callable[[Request, Response], Awaitable[None]]:
    """Build a dependency enforcing ``limit`` admissions per ``window_ms``.

    Usage:
        @router.post("/checkout", dependencies=[Depends(rate_limit(5, 60_000))])

    Args:
        limit: Max admissions per window.
        window_ms: Window size in milliseconds.
        key: Optional logical scope; defaults to the request path.

    Returns:
        Async FastAPI dependency.

    Raises:
        ValueError: At declaration time if limit or window_ms are not positive.
    """

    options = RateLimitOptions(limit=limit, window_ms=window_ms, key=key)

    async def enforce_rate_limit(request: Request, response: Response) -> None:
        """Consume one admission or raise RateLimitedAppError (HTTP 429).

        Raises:
            RateLimitedAppError: When the caller's bucket is exhausted.
        """
        if not settings.app.rate_limit_enabled:
            return

        limiter = get_rate_limiter(request)
        identity = client_ip_from_request(request)
        scope = options.key if options.key is not None else request.url.path
        key_hash = hash_identifier(f"{identity}:{scope}")

        result = limiter.check_and_record(identity, options, scope=request.url.path)
        if result.ok:
            annotate_response(response, limit=options.limit, remaining=result.remaining)
            setattr(request.state, QUOTA_STATE_ATTR, quota_headers(options.limit, result.remaining))
            logger.info(
                "rate_limit.allowed",
                extra={
                    "scope": scope,
                    "key_hash": key_hash,
                    "limit": options.limit,
                    "remaining": result.remaining,
                    "window_ms": options.window_ms,
                },
            )
            return

        retry_after = result.retry_after or 1
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "scope": scope,
                "key_hash": key_hash,
                "limit": options.limit,
                "window_ms": options.window_ms,
                "retry_after_s": retry_after,
            },
        )
        raise RateLimitedAppError(
            code="rate_limited",
            message=RATE_LIMIT_MESSAGE,
            limit=options.limit,
            retry_after=retry_after,
        )

    return enforce_rate_limit
