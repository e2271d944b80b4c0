"""Offline payment client.

Mimics the provider's account and checkout responses without any network
access, so the payment routes can be exercised in development and tests.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import uuid

from app.adapters.payments.base import AbstractPaymentClient, CheckoutSession, PaymentAccount

logger = logging.getLogger(__name__)

CHECKOUT_BASE_URL = "https://checkout.example.com/pay"


class StubPaymentClient(AbstractPaymentClient):
    """Deterministic stand-in for a hosted-checkout payment provider."""

    def __init__(self, *, secret_key: str, live: bool) -> None:
        self._secret_key = secret_key
        self.live = live
        self._sessions_by_key: dict[str, CheckoutSession] = {}
        self._lock = threading.Lock()

    async def retrieve_account(self) -> PaymentAccount:
        digest = hashlib.sha256(self._secret_key.encode()).hexdigest()[:16]
        return PaymentAccount(id=f"acct_{digest}", type="standard")

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
        with self._lock:
            if idempotency_key and idempotency_key in self._sessions_by_key:
                logger.info("payment.checkout_replayed")
                return self._sessions_by_key[idempotency_key]

            prefix = "cs_live" if self.live else "cs_test"
            session_id = f"{prefix}_{uuid.uuid4().hex}"
            session = CheckoutSession(
                id=session_id,
                url=f"{CHECKOUT_BASE_URL}/{session_id}",
                amount_total=amount * quantity,
                currency=currency.lower(),
            )
            if idempotency_key:
                self._sessions_by_key[idempotency_key] = session

        logger.info(
            "payment.checkout_created",
            extra={"session_id": session.id, "amount_total": session.amount_total},
        )
        return session
