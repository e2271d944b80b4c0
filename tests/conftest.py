"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so no .env file is loaded, and provides an isolated app
(fresh rate limiter store and user repository) per test.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

# Set default env vars that all tests might need
os.environ.setdefault("PAYMENT_PROVIDER", "stub")
os.environ.setdefault("PAYMENT_TEST_SECRET_KEY", "sk_test_123")
os.environ.setdefault("APP_BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.rate_limit.in_memory import InMemoryHitStore, SlidingWindowRateLimiter
from app.core.app_factory import create_app


@pytest.fixture
def clock() -> Mock:
    """Controllable millisecond clock (starts at t=1_000_000)."""
    return Mock(return_value=1_000_000)


@pytest.fixture
def limiter(clock: Mock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(store=InMemoryHitStore(), clock_ms=clock)


@pytest.fixture
def app(limiter: SlidingWindowRateLimiter) -> FastAPI:
    return create_app(rate_limiter=limiter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"X-User-Id": "1", "X-User-Role": "USER"}
