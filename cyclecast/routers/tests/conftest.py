"""Shared fixtures for API tests: settings, signed tokens, and a test client.

No database is started.  Route modules' DB helpers are monkeypatched per
test, and the lifespan hook (which opens the pool) is not run because the
client is not used as a context manager.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Iterator

import jwt as pyjwt
import pytest
from fastapi.testclient import TestClient

from cyclecast.config import Settings, get_settings
from cyclecast.main import create_app

TEST_JWT_SECRET = "test-secret-with-enough-length-for-hs256-signing"
TEST_USER_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[Settings]:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("SUPABASE_DB_URL", "postgresql://localhost:5432/postgres")
    monkeypatch.delenv("CYCLE_CONFIG_PATH", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(
        sub: str = str(TEST_USER_ID),
        expires_in: int = 3600,
        audience: str = "authenticated",
        secret: str = TEST_JWT_SECRET,
    ) -> str:
        now = int(time.time())
        payload = {
            "sub": sub,
            "aud": audience,
            "role": "authenticated",
            "email": "user@example.com",
            "iat": now,
            "exp": now + expires_in,
        }
        return pyjwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}
