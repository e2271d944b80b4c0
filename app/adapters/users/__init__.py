"""User storage adapters."""

from app.adapters.users.base import AbstractUserRepository, UserRecord
from app.adapters.users.in_memory import InMemoryUserRepository

__all__ = ["AbstractUserRepository", "InMemoryUserRepository", "UserRecord"]
