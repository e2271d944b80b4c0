"""Accessors for the collaborators owned by the running application."""

from __future__ import annotations

from fastapi import Request

from app.adapters.payments.base import AbstractPaymentClient
from app.core.errors import PaymentAppError
from app.services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_payment_client(request: Request) -> AbstractPaymentClient:
    """Return the payment client, or fail with 502 when it is not configured."""
    client = request.app.state.payment_client
    if client is None:
        raise PaymentAppError(
            code="payment_not_configured",
            message="Payment provider is not configured",
        )
    return client
