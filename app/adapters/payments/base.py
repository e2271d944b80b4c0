"""Payment provider client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentAccount:
    id: str
    type: str | None


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str
    amount_total: int
    currency: str


class AbstractPaymentClient(ABC):
    """Interface for payment providers used by the payment routes."""

    live: bool

    @abstractmethod
    async def retrieve_account(self) -> PaymentAccount:
        """Fetch the merchant account behind the configured secret key.

        Raises:
            PaymentAppError: If the provider call fails.
        """
        ...

    @abstractmethod
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
        """Create a hosted checkout session for a single line item.

        Args:
            amount: Unit amount in the smallest currency unit.
            currency: Lowercase ISO 4217 code.
            quantity: Number of units.
            success_url: Redirect target after payment.
            cancel_url: Redirect target when the customer backs out.
            idempotency_key: Repeated keys return the original session.

        Raises:
            PaymentAppError: If the provider call fails.
        """
        ...
