"""Root conftest: test infrastructure for all backend tests.

Provides:
- A mocked AsyncSession (no database is ever touched)
- API client factory with dependency overrides
- Autouse mock for Postmark and reset of the in-memory rate limiter
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from tests.helpers.mock_factories import make_mock_db, make_mock_user

# ─────────────────────────────────────────────────────────────────────────────
# Mocked Session + Users
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_db():
    """AsyncSession stand-in shared by the app and the test."""
    return make_mock_db()


@pytest.fixture
def test_user():
    """The authenticated merchant."""
    return make_mock_user()


# ─────────────────────────────────────────────────────────────────────────────
# API Client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_client(mock_db):
    """Factory for HTTP clients that bypass JWT auth and use the mocked session.

    ``make_client(user)`` authenticates as ``user``; ``make_client(None)``
    is an anonymous buyer. ``peer`` is the socket address the app sees.
    Overrides: get_current_user, get_current_user_optional, get_db
    """
    from app.api.deps.auth import get_current_user, get_current_user_optional
    from app.core.database import get_db
    from app.main import app

    def _make(user=None, peer: tuple[str, int] = ("127.0.0.1", 123)) -> AsyncClient:
        async def override_db():
            yield mock_db

        app.dependency_overrides[get_db] = override_db
        app.dependency_overrides[get_current_user_optional] = lambda: user
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        else:
            app.dependency_overrides.pop(get_current_user, None)

        return AsyncClient(transport=ASGITransport(app=app, client=peer), base_url="http://test")

    yield _make

    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(make_client, test_user):
    """HTTP client authenticated as test_user."""
    async with make_client(test_user) as client:
        yield client


@pytest.fixture
async def anon_client(make_client):
    """HTTP client with no authenticated user (a buyer)."""
    async with make_client(None) as client:
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# External Service Mocks + Global State
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def mock_external_services():
    """SAFETY: Always mock Postmark so tests never send email."""
    with patch(
        "app.services.email.postmark.postmark_service", new_callable=MagicMock
    ) as mock_pm:
        mock_pm.send = AsyncMock(return_value=True)
        yield {"postmark": mock_pm}


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Rate limit state is process-global; start every test clean."""
    from app.core.rate_limit import rate_limiter

    rate_limiter.reset()
    yield
    rate_limiter.reset()
