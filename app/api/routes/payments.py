from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, status

from app.adapters.payments.base import AbstractPaymentClient
from app.api.deps import get_payment_client
from app.core.errors import AppError, PaymentAppError
from app.core.http import require_json
from app.core.rate_limit import rate_limit
from app.schemas.payments import (
    AccountOut,
    CheckoutRequest,
    CheckoutSessionOut,
    PingOut,
    WebhookAck,
)
from app.schemas.result import Ok, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe", tags=["Payments"])

CHECKOUT_LIMIT = 5
CHECKOUT_WINDOW_MS = 60_000
CHECKOUT_SCOPE = "/api/stripe/checkout"

PaymentClient = Annotated[AbstractPaymentClient, Depends(get_payment_client)]


def _provider_error(exc: Exception) -> PaymentAppError:
    logger.error(
        "payment.provider_error",
        extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
    )
    return PaymentAppError(code="payment_error", message=str(exc) or "unknown error")


@router.get("/ping", response_model=Ok[PingOut])
async def ping(client: PaymentClient) -> Ok[PingOut]:
    """Connectivity check against the payment provider account."""
    try:
        account = await client.retrieve_account()
    except AppError:
        raise
    except Exception as exc:
        raise _provider_error(exc) from exc

    return ok(
        PingOut(
            env="LIVE" if client.live else "TEST",
            account=AccountOut(id=account.id, type=account.type),
        )
    )


@router.post(
    "/checkout",
    status_code=status.HTTP_201_CREATED,
    response_model=Ok[CheckoutSessionOut],
    dependencies=[
        Depends(require_json),
        Depends(rate_limit(CHECKOUT_LIMIT, CHECKOUT_WINDOW_MS, key=CHECKOUT_SCOPE)),
    ],
)
async def checkout(
    payload: CheckoutRequest,
    client: PaymentClient,
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> Ok[CheckoutSessionOut]:
    """Create a hosted checkout session (5 requests per minute per client)."""
    try:
        session = await client.create_checkout_session(
            amount=payload.amount,
            currency=payload.currency.lower(),
            quantity=payload.quantity,
            success_url=str(payload.success_url),
            cancel_url=str(payload.cancel_url),
            idempotency_key=idempotency_key,
        )
    except AppError:
        raise
    except Exception as exc:
        raise _provider_error(exc) from exc

    return ok(
        CheckoutSessionOut(
            id=session.id,
            url=session.url,
            amount_total=session.amount_total,
            currency=session.currency,
        )
    )


@router.post("/webhook", response_model=WebhookAck)
async def webhook() -> WebhookAck:
    # Event handling and signature verification are not implemented yet.
    return WebhookAck(message="not implemented yet")
