"""Request principal parsing and ownership checks.

The upstream gateway identifies the caller through two headers:
- ``X-User-Id``: positive integer user id
- ``X-User-Role``: ``ADMIN`` or ``USER`` (anything else is treated as ``USER``)

Design principles:
- Pure parsing function (``parse_principal``) for easy testing
- FastAPI dependencies (``get_principal`` / ``require_principal``) for routes
- Missing or malformed headers (either one) mean "anonymous", never an exception
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from fastapi import Depends, Header

from app.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as asserted by the request headers."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def parse_principal(user_id: str | None, role: str | None) -> Principal | None:
    """Build a Principal from raw header values.

    Args:
        user_id: Raw ``X-User-Id`` header value.
        role: Raw ``X-User-Role`` header value.

    Returns:
        Principal, or None when either header is missing or the id is not a
        positive integer.

    Examples:
        >>> parse_principal("7", "admin")
        Principal(id=7, role=<Role.ADMIN: 'ADMIN'>)
        >>> parse_principal("7", "guest").role
        <Role.USER: 'USER'>
        >>> parse_principal("0", "USER") is None
        True
    """
    if user_id is None or role is None:
        return None
    try:
        parsed_id = int(user_id.strip())
    except ValueError:
        return None
    if parsed_id <= 0:
        return None

    parsed_role = Role.ADMIN if role.strip().upper() == Role.ADMIN.value else Role.USER
    return Principal(id=parsed_id, role=parsed_role)


async def get_principal(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
    x_user_role: Annotated[str | None, Header(alias="X-User-Role")] = None,
) -> Principal | None:
    """FastAPI dependency returning the caller, or None for anonymous requests.

    Both ``X-User-Id`` and ``X-User-Role`` must be present.
    """
    return parse_principal(x_user_id, x_user_role)


async def require_principal(
    principal: Annotated[Principal | None, Depends(get_principal)],
) -> Principal:
    """FastAPI dependency rejecting anonymous callers.

    Raises:
        AuthenticationAppError: 403 when the principal headers are missing or invalid.
    """
    if principal is None:
        logger.warning("auth.missing_principal", extra={"reason": "no_valid_user_id"})
        raise AuthenticationAppError(
            code="forbidden",
            message="No ownerId",
            details={"hint": "Provide a positive integer X-User-Id and an X-User-Role header"},
        )
    return principal


def ensure_can_modify(principal: Principal, owner_id: int | None, user_id: int) -> None:
    """Allow admins, the record's owner, or the user themself to mutate it.

    Raises:
        AuthenticationAppError: 403 for any other caller.
    """
    if principal.is_admin or principal.id in (owner_id, user_id):
        return
    logger.warning(
        "auth.forbidden",
        extra={"principal_id": principal.id, "target_user_id": user_id},
    )
    raise AuthenticationAppError(
        code="forbidden",
        message="Not allowed to modify this user",
        details={"user_id": user_id},
    )
