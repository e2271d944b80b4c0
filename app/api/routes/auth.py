from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_user_service
from app.core.http import require_json
from app.core.rate_limit import rate_limit
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.result import Ok, ok
from app.schemas.user import RegisteredUserOut, UserOut
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

REGISTER_LIMIT = 2
REGISTER_WINDOW_MS = 10_000


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=Ok[RegisteredUserOut],
    dependencies=[
        Depends(require_json),
        Depends(rate_limit(REGISTER_LIMIT, REGISTER_WINDOW_MS)),
    ],
)
async def register(
    payload: RegisterRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> Ok[RegisteredUserOut]:
    """Register a user with email and password.

    Returns 201 with the created user; 409 if the email is taken and 429
    after two attempts in ten seconds from the same client.
    """
    user = await service.register(
        email=payload.email,
        password=payload.password,
        name=payload.name,
    )
    return ok(
        RegisteredUserOut(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
        )
    )


@router.post(
    "/login",
    response_model=Ok[UserOut],
    dependencies=[Depends(require_json)],
)
async def login(
    payload: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> Ok[UserOut]:
    """Verify email/password credentials (403 on mismatch)."""
    user = await service.authenticate(email=payload.email, password=payload.password)
    return ok(UserOut(id=user.id, name=user.name, email=user.email))
