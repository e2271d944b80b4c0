"""Factory pattern for creating payment client instances."""

from app.adapters.payments.base import AbstractPaymentClient
from app.adapters.payments.stripe_client import StripePaymentClient
from app.adapters.payments.stub import StubPaymentClient
from app.core.config import Settings, settings as default_settings
from app.core.errors import ValidationAppError


def resolve_secret_key(cfg: Settings) -> str:
    """Pick the secret key for the current environment and validate its prefix.

    Production uses the live key (``sk_live_``); every other environment
    uses the test key (``sk_test_``).

    Raises:
        ValidationAppError: If the key is missing or has the wrong prefix.
    """
    live = cfg.is_live
    key = cfg.payment.live_secret_key if live else cfg.payment.test_secret_key
    label = "LIVE" if live else "TEST"

    if not key:
        raise ValidationAppError(
            code="payment_missing_secret_key",
            message=f"Missing payment secret key for {label} environment",
            details={"hint": f"Set PAYMENT_{label}_SECRET_KEY"},
        )

    expected_prefix = "sk_live_" if live else "sk_test_"
    if not key.startswith(expected_prefix):
        raise ValidationAppError(
            code="payment_invalid_secret_key",
            message=f"{label} environment requires a {expected_prefix} key",
        )
    return key


def create_payment_client(cfg: Settings | None = None) -> AbstractPaymentClient:
    """Instantiate the payment client for the configured provider.

    Returns:
        AbstractPaymentClient: Configured payment client instance.

    Raises:
        ValidationAppError: If the provider is unknown or its key is invalid.
    """
    cfg = cfg or default_settings
    provider = cfg.payment.provider.lower()

    if provider == "stripe":
        return StripePaymentClient(
            secret_key=resolve_secret_key(cfg),
            live=cfg.is_live,
            api_version=cfg.payment.api_version,
        )

    if provider == "stub":
        return StubPaymentClient(secret_key=resolve_secret_key(cfg), live=cfg.is_live)

    raise ValidationAppError(
        code="payment_unknown_provider",
        message=f"Unknown payment provider: '{provider}'. Supported providers: stripe, stub",
        details={"provider": provider},
    )
