"""Pydantic schemas for payment provider endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, HttpUrl


class AccountOut(BaseModel):
    id: str
    type: str | None = None


class PingOut(BaseModel):
    env: Literal["LIVE", "TEST"]
    account: AccountOut


class CheckoutRequest(BaseModel):
    """Single line-item checkout request."""

    amount: int = Field(..., gt=0, description="Unit amount in the smallest currency unit.")
    currency: str = Field(
        "usd",
        min_length=3,
        max_length=3,
        pattern=r"^[A-Za-z]{3}$",
        description="ISO 4217 currency code.",
    )
    quantity: int = Field(1, ge=1, le=100)
    success_url: HttpUrl
    cancel_url: HttpUrl


class CheckoutSessionOut(BaseModel):
    id: str
    url: str
    amount_total: int
    currency: str


class WebhookAck(BaseModel):
    ok: Literal[True] = True
    message: str
