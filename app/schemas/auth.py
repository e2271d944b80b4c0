"""Pydantic schemas for credential registration and login."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt rejects (or silently truncates) input longer than 72 bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


def _within_bcrypt_limit(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(
        ...,
        min_length=8,
        description="Plain-text password, at least 8 characters and at most 72 bytes.",
    )
    name: str | None = Field(None, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _within_bcrypt_limit(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _within_bcrypt_limit(v)
