"""In-memory user repository.

Per-process and non-persistent: suitable for the demo deployment and tests.
Ids are sequential and never reused after deletion.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace

from app.adapters.users.base import AbstractUserRepository, UserRecord


class InMemoryUserRepository(AbstractUserRepository):
    """Dict-backed repository keyed by user id."""

    def __init__(self) -> None:
        self._rows: dict[int, UserRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    async def list_all(self) -> list[UserRecord]:
        with self._lock:
            return [replace(row) for _, row in sorted(self._rows.items())]

    async def get(self, user_id: int) -> UserRecord | None:
        with self._lock:
            row = self._rows.get(user_id)
            return replace(row) if row else None

    async def get_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            for row in self._rows.values():
                if row.email.lower() == email.lower():
                    return replace(row)
            return None

    async def create(
        self,
        *,
        email: str,
        name: str | None = None,
        owner_id: int | None = None,
        password_hash: str | None = None,
    ) -> UserRecord:
        with self._lock:
            row = UserRecord(
                id=next(self._ids),
                email=email,
                name=name,
                owner_id=owner_id,
                password_hash=password_hash,
            )
            self._rows[row.id] = row
            return replace(row)

    async def update(self, user_id: int, **fields: str) -> UserRecord | None:
        with self._lock:
            row = self._rows.get(user_id)
            if row is None:
                return None
            updated = replace(row, **fields)
            self._rows[user_id] = updated
            return replace(updated)

    async def delete(self, user_id: int) -> bool:
        with self._lock:
            return self._rows.pop(user_id, None) is not None
