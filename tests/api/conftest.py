"""API test fixtures — organization context and merchant ownership.

Builds on root conftest fixtures (mock_db, test_user, make_client,
api_client, anon_client, mock_external_services).

Domain operations are singletons, so patching a method on the shared
instance covers every router and dependency that imports it.
"""

from __future__ import annotations

from contextlib import ExitStack
from unittest.mock import AsyncMock, patch

import pytest

from app.domain import organization_ops, product_ops

from tests.helpers.mock_factories import make_mock_organization, make_mock_product


# ─────────────────────────────────────────────────────────────────────────────
# Organization Context
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def test_org(test_user):
    """The merchant's organization."""
    return make_mock_organization(owner_id=test_user.id)


@pytest.fixture
async def org_client(make_client, test_user, test_org):
    """Authenticated client whose current organization is test_org."""
    from app.api.deps.organization import get_current_organization
    from app.main import app

    async with make_client(test_user) as client:
        app.dependency_overrides[get_current_organization] = lambda: test_org
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# Products + Membership
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def test_product(test_org):
    """A published product owned by test_org."""
    return make_mock_product(organization_id=test_org.id)


@pytest.fixture
def as_merchant(test_product, test_org):
    """Make test_user a member of test_product's organization.

    Call with a role (default ``owner``) or ``None`` for a non-member.
    Patches stay active until the test ends.
    """
    with ExitStack() as stack:

        def _apply(role: str | None = "owner", product=test_product):
            stack.enter_context(
                patch.object(product_ops, "get", new_callable=AsyncMock, return_value=product)
            )
            stack.enter_context(
                patch.object(
                    organization_ops, "get_member_role", new_callable=AsyncMock, return_value=role
                )
            )
            stack.enter_context(
                patch.object(
                    organization_ops,
                    "is_member",
                    new_callable=AsyncMock,
                    return_value=role is not None,
                )
            )
            stack.enter_context(
                patch.object(organization_ops, "get", new_callable=AsyncMock, return_value=test_org)
            )

        yield _apply

