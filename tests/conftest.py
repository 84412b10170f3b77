"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports ``rento.core.config``
so the global settings object is built with test values and no .env file.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault(
    "APP_API_KEYS",
    "landlord-key:landlord-1,tenant-key:tenant-1,other-key:other-1",
)
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rento.adapters.rate_limit import InMemoryRateLimiter
from rento.adapters.store import InMemoryRentoStore
from rento.core.app_factory import create_app

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

LANDLORD_HEADERS = {"X-API-Key": "landlord-key"}
TENANT_HEADERS = {"X-API-Key": "tenant-key"}
OTHER_HEADERS = {"X-API-Key": "other-key"}


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock for services; always returns ``FIXED_NOW``."""
    return lambda: FIXED_NOW


@pytest.fixture
def store() -> InMemoryRentoStore:
    return InMemoryRentoStore()


@pytest.fixture
def property_record(store: InMemoryRentoStore):
    """A property owned by ``landlord-1``."""
    return store.seed_property("landlord-1", property_id="prop-1", title="Sunny loft")


@pytest.fixture
def app(store: InMemoryRentoStore, clock) -> FastAPI:
    """Fresh app per test: its own store, limiter and fixed clock."""
    limiter = InMemoryRateLimiter(rng=lambda: 1.0)
    return create_app(store=store, rate_limiter=limiter, clock=clock)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def landlord_headers() -> dict[str, str]:
    return dict(LANDLORD_HEADERS)


@pytest.fixture
def tenant_headers() -> dict[str, str]:
    return dict(TENANT_HEADERS)


@pytest.fixture
def other_headers() -> dict[str, str]:
    return dict(OTHER_HEADERS)
