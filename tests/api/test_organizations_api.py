"""Organization API tests — listing memberships and creating organizations."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from app.domain import organization_ops

from tests.helpers.mock_factories import make_mock_organization


class TestOrganizations:
    @pytest.mark.asyncio
    async def test_lists_memberships(self, api_client, test_org):
        with patch.object(
            organization_ops, "get_for_user", new_callable=AsyncMock, return_value=[test_org]
        ):
            response = await api_client.get("/api/v1/organizations/")

        assert response.status_code == 200
        assert response.json()[0]["slug"] == test_org.slug

    @pytest.mark.asyncio
    async def test_creates_owned_org(self, api_client, test_user):
        org = make_mock_organization(name="Acme Foods", owner_id=test_user.id, domain="acme.com")

        with patch.object(
            organization_ops, "create", new_callable=AsyncMock, return_value=org
        ) as mock_create:
            response = await api_client.post(
                "/api/v1/organizations/", json={"name": "Acme Foods", "domain": "acme.com"}
            )

        assert response.status_code == 201
        assert response.json()["owner_id"] == str(test_user.id)
        assert mock_create.call_args.kwargs["owner_id"] == test_user.id

    @pytest.mark.asyncio
    async def test_requires_auth(self, anon_client):
        response = await anon_client.get("/api/v1/organizations/")
        assert response.status_code == 401


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, anon_client):
        response = await anon_client.get("/health")
        assert response.json() == {"status": "healthy"}
