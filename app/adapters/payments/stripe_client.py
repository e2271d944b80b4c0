"""Stripe payment client adapter."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any

import stripe

from app.adapters.payments.base import AbstractPaymentClient, CheckoutSession, PaymentAccount
from app.core.errors import PaymentAppError

logger = logging.getLogger(__name__)


class StripePaymentClient(AbstractPaymentClient):
    """Client for the Stripe accounts and hosted checkout APIs.

    Uses the official ``stripe`` SDK. Its calls are blocking, so they run in
    the default thread pool executor to keep the event loop free.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        live: bool,
        api_version: str | None = None,
        product_name: str = "Order",
    ) -> None:
        """Initialize the Stripe client.

        Args:
            secret_key: ``sk_test_`` or ``sk_live_`` secret key.
            live: Whether the key belongs to the live environment.
            api_version: Optional pinned Stripe API version.
            product_name: Line item name shown on the hosted checkout page.
        """
        self._secret_key = secret_key
        self._api_version = api_version
        self._product_name = product_name
        self.live = live

    def _request_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"api_key": self._secret_key}
        if self._api_version:
            options["stripe_version"] = self._api_version
        return options

    async def _call(self, func, **params: Any) -> Any:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, **params))
        except stripe.StripeError as exc:
            message = exc.user_message or str(exc) or "unknown error"
            logger.error(
                "payment.stripe_error",
                extra={"error_type": type(exc).__name__, "http_status": exc.http_status},
            )
            raise PaymentAppError(
                code="payment_error",
                message=message,
                details={"provider": "stripe"},
            ) from exc

    async def retrieve_account(self) -> PaymentAccount:
        account = await self._call(stripe.Account.retrieve, **self._request_options())
        return PaymentAccount(id=account.id, type=getattr(account, "type", None))

    async def create_checkout_session(
        self,
        *,
        amount: int,
        currency: str,
        quantity: int,
        success_url: str,
        cancel_url: str,
        idempotency_key: str | None = None,
    ) -> CheckoutSession:
        params: dict[str, Any] = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": currency,
                        "unit_amount": amount,
                        "product_data": {"name": self._product_name},
                    },
                    "quantity": quantity,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            **self._request_options(),
        }
        if idempotency_key:
            params["idempotency_key"] = idempotency_key

        session = await self._call(stripe.checkout.Session.create, **params)
        logger.info(
            "payment.checkout_created",
            extra={"session_id": session.id, "amount_total": session.amount_total},
        )
        return CheckoutSession(
            id=session.id,
            url=session.url,
            amount_total=session.amount_total if session.amount_total is not None else amount * quantity,
            currency=session.currency or currency,
        )
