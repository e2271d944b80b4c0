"""Password hashing and input sanitization helpers.

Uses the ``bcrypt`` library directly; passlib is unmaintained and does not
work with bcrypt >= 4.
"""

from __future__ import annotations

import bcrypt

from app.core.config import settings


def hash_password(plain: str, *, rounds: int | None = None) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    salt = bcrypt.gensalt(rounds=rounds or settings.app.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def sanitize_input(value: str) -> str:
    """Escape angle brackets so stored text cannot inject markup."""
    return value.replace("<", "&lt;").replace(">", "&gt;")
