"""User directory service.

Holds the business rules around the repository:
- email uniqueness (409 conflict)
- not-found mapping (404)
- ownership checks on mutation (403)
- credential registration and verification with bcrypt
"""

from __future__ import annotations

import asyncio
import logging

from app.adapters.users.base import AbstractUserRepository, UserRecord
from app.core.auth import Principal, ensure_can_modify
from app.core.errors import AuthenticationAppError, ConflictAppError, NotFoundAppError
from app.core.logging import hash_identifier
from app.core.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """CRUD and credential operations over an injected repository."""

    def __init__(self, repository: AbstractUserRepository) -> None:
        self._repository = repository

    async def list_users(self) -> list[UserRecord]:
        return await self._repository.list_all()

    async def get_user(self, user_id: int) -> UserRecord:
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundAppError(
                code="not_found",
                message="User not found.",
                details={"user_id": user_id},
            )
        return user

    async def _ensure_email_free(self, email: str, *, exclude_id: int | None = None) -> None:
        existing = await self._repository.get_by_email(email)
        if existing is not None and existing.id != exclude_id:
            raise ConflictAppError(
                code="conflict",
                message="email already exists",
                details={"field": "email"},
            )

    async def create_user(self, *, name: str, email: str, owner: Principal) -> UserRecord:
        await self._ensure_email_free(email)
        user = await self._repository.create(email=email, name=name, owner_id=owner.id)
        logger.info("user.created", extra={"user_id": user.id, "owner_id": owner.id})
        return user

    async def update_user(
        self,
        user_id: int,
        *,
        principal: Principal,
        name: str | None = None,
        email: str | None = None,
    ) -> UserRecord:
        current = await self.get_user(user_id)
        ensure_can_modify(principal, current.owner_id, user_id)

        fields: dict[str, str] = {}
        if name is not None:
            fields["name"] = name
        if email is not None:
            await self._ensure_email_free(email, exclude_id=user_id)
            fields["email"] = email

        updated = await self._repository.update(user_id, **fields)
        if updated is None:
            # Deleted between the lookup and the write
            raise NotFoundAppError(code="not_found", message="User not found.")
        logger.info("user.updated", extra={"user_id": user_id, "fields": sorted(fields)})
        return updated

    async def delete_user(self, user_id: int, *, principal: Principal) -> None:
        current = await self.get_user(user_id)
        ensure_can_modify(principal, current.owner_id, user_id)
        if not await self._repository.delete(user_id):
            raise NotFoundAppError(code="not_found", message="User not found.")
        logger.info("user.deleted", extra={"user_id": user_id})

    async def register(self, *, email: str, password: str, name: str | None = None) -> UserRecord:
        """Create a credential-backed user.

        Raises:
            ConflictAppError: If the email is already registered.
        """
        await self._ensure_email_free(email)
        # bcrypt is CPU-bound; keep it off the event loop
        loop = asyncio.get_event_loop()
        password_hash = await loop.run_in_executor(None, hash_password, password)
        user = await self._repository.create(
            email=email,
            name=name,
            password_hash=password_hash,
        )
        logger.info("user.registered", extra={"user_id": user.id})
        return user

    async def authenticate(self, *, email: str, password: str) -> UserRecord:
        """Verify email/password credentials.

        Raises:
            AuthenticationAppError: On unknown email, password-less account or
                wrong password (the same message for all three).
        """
        user = await self._repository.get_by_email(email)
        verified = False
        if user is not None and user.password_hash:
            loop = asyncio.get_event_loop()
            verified = await loop.run_in_executor(
                None, verify_password, password, user.password_hash
            )
        if not verified:
            logger.warning("auth.invalid_credentials", extra={"email_hash": hash_identifier(email)})
            raise AuthenticationAppError(code="forbidden", message="Invalid credentials")
        logger.info("auth.login", extra={"user_id": user.id})
        return user
