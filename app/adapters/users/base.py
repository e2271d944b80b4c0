"""User repository interface and record type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserRecord:
    """Stored user row."""

    id: int
    email: str
    name: str | None = None
    owner_id: int | None = None
    password_hash: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


class AbstractUserRepository(ABC):
    """Storage interface used by UserService.

    Implementations raise nothing for missing rows: lookups return None and
    writes report success as a bool, leaving error mapping to the service.
    """

    @abstractmethod
    async def list_all(self) -> list[UserRecord]:
        """Return all users ordered by id ascending."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, user_id: int) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    async def create(
        self,
        *,
        email: str,
        name: str | None = None,
        owner_id: int | None = None,
        password_hash: str | None = None,
    ) -> UserRecord:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: int, **fields: str) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        raise NotImplementedError
