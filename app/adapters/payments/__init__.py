"""Payment adapter layer - abstracts over payment providers."""

from app.adapters.payments.base import AbstractPaymentClient, CheckoutSession, PaymentAccount
from app.adapters.payments.factory import create_payment_client
from app.adapters.payments.stripe_client import StripePaymentClient
from app.adapters.payments.stub import StubPaymentClient

__all__ = [
    "AbstractPaymentClient",
    "CheckoutSession",
    "PaymentAccount",
    "StripePaymentClient",
    "StubPaymentClient",
    "create_payment_client",
]
