"""Pydantic schemas for the user directory."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.core.security import sanitize_input


def _clean_name(value: str) -> str:
    cleaned = sanitize_input(value.strip())
    if not cleaned:
        raise ValueError("Invalid 'name'.")
    if len(cleaned) > 100:
        raise ValueError("name must be at most 100 characters")
    return cleaned


class UserCreate(BaseModel):
    """Payload for POST /api/users.

    The owner is taken from the X-User-Id header, never from the body.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Display name (1-100 characters).")
    email: EmailStr

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class UserUpdate(BaseModel):
    """Payload for PUT /api/users/{id}; at least one field is required."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else _clean_name(v)

    @model_validator(mode="after")
    def require_any_field(self) -> "UserUpdate":
        if self.name is None and self.email is None:
            raise ValueError("No fields to update.")
        return self


class UserOut(BaseModel):
    id: int
    name: str | None
    email: str


class RegisteredUserOut(UserOut):
    created_at: datetime
