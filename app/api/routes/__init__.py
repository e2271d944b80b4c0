from __future__ import annotations

from app.api.routes.auth import router as auth_router
from app.api.routes.health import router as health_router
from app.api.routes.payments import router as payments_router
from app.api.routes.server_time import router as time_router
from app.api.routes.users import router as users_router

__all__ = [
    "auth_router",
    "health_router",
    "payments_router",
    "time_router",
    "users_router",
]
