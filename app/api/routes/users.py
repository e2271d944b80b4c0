from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from app.api.deps import get_user_service
from app.core.auth import Principal, require_principal
from app.core.http import require_json
from app.schemas.result import Ok, ok
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

UserId = Annotated[int, Path(gt=0, description="Positive integer user id.")]
Service = Annotated[UserService, Depends(get_user_service)]
Caller = Annotated[Principal, Depends(require_principal)]


def _out(user) -> UserOut:
    return UserOut(id=user.id, name=user.name, email=user.email)


@router.get("", response_model=Ok[list[UserOut]])
async def list_users(service: Service) -> Ok[list[UserOut]]:
    """List users ordered by id."""
    users = await service.list_users()
    return ok([_out(u) for u in users])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Ok[UserOut],
    dependencies=[Depends(require_json)],
)
async def create_user(payload: UserCreate, service: Service, caller: Caller) -> Ok[UserOut]:
    """Create a user owned by the calling principal (X-User-Id)."""
    user = await service.create_user(name=payload.name, email=payload.email, owner=caller)
    return ok(_out(user))


@router.get("/{user_id}", response_model=Ok[UserOut])
async def get_user(user_id: UserId, service: Service) -> Ok[UserOut]:
    return ok(_out(await service.get_user(user_id)))


@router.put(
    "/{user_id}",
    response_model=Ok[UserOut],
    dependencies=[Depends(require_json)],
)
async def update_user(
    user_id: UserId,
    payload: UserUpdate,
    service: Service,
    caller: Caller,
) -> Ok[UserOut]:
    """Update name and/or email. At least one field is required."""
    user = await service.update_user(
        user_id,
        principal=caller,
        name=payload.name,
        email=payload.email,
    )
    return ok(_out(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UserId, service: Service, caller: Caller) -> Response:
    await service.delete_user(user_id, principal=caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
