"""Tests for payment provider routes and the payment client factory."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
import stripe
from fastapi.testclient import TestClient

from app.adapters.payments.factory import create_payment_client, resolve_secret_key
from app.adapters.payments.stripe_client import StripePaymentClient
from app.adapters.payments.stub import StubPaymentClient
from app.core.app_factory import create_app
from app.core.config import PaymentSettings, Settings
from app.core.errors import ValidationAppError

CHECKOUT_BODY = {
    "amount": 1200,
    "currency": "JPY",
    "quantity": 2,
    "success_url": "https://shop.example.com/success",
    "cancel_url": "https://shop.example.com/cancel",
}


def _settings(app_env: str = "development", **payment) -> Settings:
    return Settings(app_env=app_env, payment=PaymentSettings(**payment))


class TestPing:
    def test_ping_reports_test_environment(self, client: TestClient) -> None:
        resp = client.get("/api/stripe/ping")

        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["data"]["env"] == "TEST"
        assert body["data"]["account"]["id"].startswith("acct_")
        assert body["data"]["account"]["type"] == "standard"

    def test_provider_failure_maps_to_502(self, limiter) -> None:
        failing = Mock(spec=StubPaymentClient)
        failing.live = False
        failing.retrieve_account = AsyncMock(side_effect=RuntimeError("connection reset"))
        client = TestClient(create_app(rate_limiter=limiter, payment_client=failing))

        resp = client.get("/api/stripe/ping")

        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "payment_error"
        assert resp.json()["error"]["message"] == "connection reset"

    def test_unconfigured_provider_maps_to_502(self, app) -> None:
        app.state.payment_client = None

        resp = TestClient(app).get("/api/stripe/ping")

        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "payment_not_configured"


class TestCheckout:
    def test_checkout_creates_session(self, client: TestClient) -> None:
        resp = client.post("/api/stripe/checkout", json=CHECKOUT_BODY)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["id"].startswith("cs_test_")
        assert data["url"].endswith(data["id"])
        assert data["amount_total"] == 2400
        assert data["currency"] == "jpy"
        assert resp.headers["X-RateLimit-Limit"] == "5"
        assert resp.headers["X-RateLimit-Remaining"] == "4"

    def test_idempotency_key_returns_same_session(self, client: TestClient) -> None:
        headers = {"Idempotency-Key": "order-42"}

        first = client.post("/api/stripe/checkout", json=CHECKOUT_BODY, headers=headers)
        second = client.post("/api/stripe/checkout", json=CHECKOUT_BODY, headers=headers)

        assert first.json()["data"]["id"] == second.json()["data"]["id"]

    def test_invalid_amount_is_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/stripe/checkout", json={**CHECKOUT_BODY, "amount": 0})

        assert resp.status_code == 400

    def test_sixth_checkout_in_a_minute_is_throttled(self, client: TestClient, clock: Mock) -> None:
        for _ in range(5):
            assert client.post("/api/stripe/checkout", json=CHECKOUT_BODY).status_code == 201
            clock.return_value += 1_000

        resp = client.post("/api/stripe/checkout", json=CHECKOUT_BODY)

        assert resp.status_code == 429
        # Oldest hit is 5s old: ceil(55s)
        assert resp.headers["Retry-After"] == "55"
        assert resp.headers["X-RateLimit-Remaining"] == "0"
        assert resp.json()["ok"] is False

    def test_checkout_quota_is_per_client(self, client: TestClient) -> None:
        for _ in range(5):
            client.post("/api/stripe/checkout", json=CHECKOUT_BODY, headers={"X-Forwarded-For": "1.1.1.1"})

        blocked = client.post("/api/stripe/checkout", json=CHECKOUT_BODY, headers={"X-Forwarded-For": "1.1.1.1"})
        other = client.post("/api/stripe/checkout", json=CHECKOUT_BODY, headers={"X-Forwarded-For": "2.2.2.2"})

        assert blocked.status_code == 429
        assert other.status_code == 201

    def test_unconfigured_provider_keeps_quota_headers(self, app) -> None:
        app.state.payment_client = None

        resp = TestClient(app).post("/api/stripe/checkout", json=CHECKOUT_BODY)

        assert resp.status_code == 502
        assert resp.headers["X-RateLimit-Limit"] == "5"
        assert resp.headers["X-RateLimit-Remaining"] == "4"

    def test_checkout_requires_post(self, client: TestClient) -> None:
        resp = client.get("/api/stripe/checkout")

        assert resp.status_code == 405
        assert resp.json()["error"]["code"] == "method_not_allowed"


def test_webhook_acknowledges(client: TestClient) -> None:
    resp = client.post("/api/stripe/webhook", content=b"{}")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "message": "not implemented yet"}


class TestPaymentFactory:
    def test_test_environment_uses_test_key(self) -> None:
        cfg = _settings(test_secret_key="sk_test_abc", live_secret_key="sk_live_abc")

        assert resolve_secret_key(cfg) == "sk_test_abc"
        assert create_payment_client(cfg).live is False

    def test_production_uses_live_key(self) -> None:
        cfg = _settings("production", test_secret_key="sk_test_abc", live_secret_key="sk_live_abc")

        assert resolve_secret_key(cfg) == "sk_live_abc"
        assert create_payment_client(cfg).live is True

    def test_missing_key_raises(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            resolve_secret_key(_settings(test_secret_key=None))

        assert exc_info.value.code == "payment_missing_secret_key"

    @pytest.mark.parametrize(
        ("app_env", "payment"),
        [
            ("production", {"live_secret_key": "sk_test_oops"}),
            ("development", {"test_secret_key": "sk_live_oops"}),
        ],
    )
    def test_wrong_prefix_raises(self, app_env: str, payment: dict) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            resolve_secret_key(_settings(app_env, **payment))

        assert exc_info.value.code == "payment_invalid_secret_key"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_payment_client(_settings(provider="paypal", test_secret_key="sk_test_abc"))

        assert exc_info.value.code == "payment_unknown_provider"

    def test_stripe_provider_builds_stripe_client(self) -> None:
        client = create_payment_client(_settings(provider="stripe", test_secret_key="sk_test_abc"))

        assert isinstance(client, StripePaymentClient)
        assert client.live is False


class TestStripeClient:
    ACCOUNT_RETRIEVE = "app.adapters.payments.stripe_client.stripe.Account.retrieve"
    SESSION_CREATE = "app.adapters.payments.stripe_client.stripe.checkout.Session.create"

    @pytest.fixture
    def stripe_app(self, limiter):
        client = StripePaymentClient(secret_key="sk_test_123", live=False)
        return create_app(rate_limiter=limiter, payment_client=client)

    def test_ping_retrieves_own_account(self, stripe_app) -> None:
        account = SimpleNamespace(id="acct_1Abc", type="standard")

        with patch(self.ACCOUNT_RETRIEVE, return_value=account) as retrieve:
            resp = TestClient(stripe_app).get("/api/stripe/ping")

        assert resp.status_code == 200
        assert resp.json()["data"] == {"env": "TEST", "account": {"id": "acct_1Abc", "type": "standard"}}
        retrieve.assert_called_once_with(api_key="sk_test_123")

    def test_stripe_error_maps_to_502(self, stripe_app) -> None:
        error = stripe.AuthenticationError("Invalid API Key provided")

        with patch(self.ACCOUNT_RETRIEVE, side_effect=error):
            resp = TestClient(stripe_app).get("/api/stripe/ping")

        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "payment_error"
        assert "Invalid API Key provided" in resp.json()["error"]["message"]

    def test_checkout_creates_hosted_session(self, stripe_app) -> None:
        session = SimpleNamespace(
            id="cs_test_1",
            url="https://checkout.stripe.com/c/pay/cs_test_1",
            amount_total=2400,
            currency="jpy",
        )

        with patch(self.SESSION_CREATE, return_value=session) as create:
            resp = TestClient(stripe_app).post(
                "/api/stripe/checkout",
                json=CHECKOUT_BODY,
                headers={"Idempotency-Key": "order-42"},
            )

        assert resp.status_code == 201
        assert resp.json()["data"] == {
            "id": "cs_test_1",
            "url": "https://checkout.stripe.com/c/pay/cs_test_1",
            "amount_total": 2400,
            "currency": "jpy",
        }
        kwargs = create.call_args.kwargs
        assert kwargs["mode"] == "payment"
        assert kwargs["idempotency_key"] == "order-42"
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["line_items"] == [
            {
                "price_data": {"currency": "jpy", "unit_amount": 1200, "product_data": {"name": "Order"}},
                "quantity": 2,
            }
        ]

    def test_checkout_without_idempotency_key_omits_it(self, stripe_app) -> None:
        session = SimpleNamespace(id="cs_test_2", url="https://checkout.stripe.com/x", amount_total=None, currency=None)

        with patch(self.SESSION_CREATE, return_value=session) as create:
            resp = TestClient(stripe_app).post("/api/stripe/checkout", json=CHECKOUT_BODY)

        assert "idempotency_key" not in create.call_args.kwargs
        assert resp.json()["data"]["amount_total"] == 2400
        assert resp.json()["data"]["currency"] == "jpy"
