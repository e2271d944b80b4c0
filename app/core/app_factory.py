from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and
the long-lived collaborators on ``app.state``) so each test can build an
isolated instance.
"""

import logging

from fastapi import FastAPI

from app.adapters.payments.base import AbstractPaymentClient
from app.adapters.payments.factory import create_payment_client
from app.adapters.rate_limit.in_memory import InMemoryHitStore, SlidingWindowRateLimiter
from app.adapters.users.base import AbstractUserRepository
from app.adapters.users.in_memory import InMemoryUserRepository
from app.api.routes import (
    auth_router,
    health_router,
    payments_router,
    time_router,
    users_router,
)
from app.core.config import settings
from app.core.errors import ValidationAppError
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware, security_headers_middleware
from app.core.openapi import apply_openapi_customizations
from app.schemas.result import Fail
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": Fail, "description": "Invalid request"},
    403: {"model": Fail, "description": "Missing or insufficient principal"},
    500: {"model": Fail, "description": "Unexpected server error"},
}


def _build_payment_client() -> AbstractPaymentClient | None:
    """Create the configured payment client, or None when misconfigured.

    A missing payment key disables the payment routes (502) instead of
    preventing the rest of the API from starting.
    """
    try:
        return create_payment_client()
    except ValidationAppError as exc:
        logger.error(
            "payment.client_unavailable",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        return None


def create_app(
    *,
    rate_limiter: SlidingWindowRateLimiter | None = None,
    user_repository: AbstractUserRepository | None = None,
    payment_client: AbstractPaymentClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Limiter to use; a fresh in-memory one by default.
        user_repository: User storage; in-memory by default.
        payment_client: Payment client; built from settings by default.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="User Directory API",
        description=(
            "CRUD user directory with credential registration, payment "
            "checkout stubs and per-client sliding-window rate limiting. "
            "Responses use the {ok, data} / {ok, error} envelope."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.rate_limiter = rate_limiter or SlidingWindowRateLimiter(store=InMemoryHitStore())
    app.state.user_service = UserService(user_repository or InMemoryUserRepository())
    app.state.payment_client = payment_client or _build_payment_client()

    # Middleware (last registered runs first)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(users_router, prefix="/api", responses=_ERROR_RESPONSES)
    app.include_router(auth_router, prefix="/api", responses=_ERROR_RESPONSES)
    app.include_router(payments_router, prefix="/api", responses=_ERROR_RESPONSES)
    app.include_router(time_router, prefix="/api")
    app.include_router(health_router)

    # OpenAPI customizations (principal headers, tags)
    apply_openapi_customizations(app)

    return app
