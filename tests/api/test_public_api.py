"""Public product page tests — filtering by token, membership and publication."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.domain import product_ops
from app.domain.access_token_operations import TokenValidationResult
from app.models.access_token import AccessLevel

from tests.helpers.mock_factories import make_mock_product


def _valid(level: AccessLevel, channel_id: str = "email_campaign") -> TokenValidationResult:
    return TokenValidationResult(
        valid=True,
        access_level=level,
        token_id=uuid.uuid4(),
        channel_id=channel_id,
    )


@pytest.fixture
def validate_token():
    with patch(
        "app.services.access_resolver.access_token_ops.validate_token",
        new_callable=AsyncMock,
    ) as mock_validate:
        yield mock_validate


class TestPublicView:
    @pytest.mark.asyncio
    async def test_buyer_without_token_sees_public_tier(self, anon_client, as_merchant, test_product):
        as_merchant(None)

        response = await anon_client.get(f"/api/v1/public/products/{test_product.id}")

        assert response.status_code == 200
        body = response.json()
        data = body["product_data"]
        assert data["product_name"] == "Vitamin C 1000mg"
        assert data["price"] == {
            "_locked": True,
            "_required_level": "after_click",
            "_preview": "•••",
        }
        assert body["_access_level"] == "public"
        assert body["_access_source"] == "public"
        assert body["_access_label"] == "Browse Mode"
        assert body["_locked_fields"] == ["price"]
        assert body["organization_name"] == "__test_supplier"

    @pytest.mark.asyncio
    async def test_valid_token_unlocks_its_tier(
        self, anon_client, as_merchant, test_product, validate_token
    ):
        as_merchant(None)
        validate_token.return_value = _valid(AccessLevel.AFTER_CLICK)

        response = await anon_client.get(
            f"/api/v1/public/products/{test_product.id}", params={"token": "a" * 64}
        )

        body = response.json()
        assert body["product_data"]["price"] == 120
        assert body["_access_source"] == "token"
        assert body["_channel_id"] == "email_campaign"
        assert body["_filtered"] is True
        validate_token.assert_awaited_once()
        assert validate_token.call_args[0][2] == test_product.id

    @pytest.mark.asyncio
    async def test_invalid_token_falls_back_to_public(
        self, anon_client, as_merchant, test_product, validate_token
    ):
        as_merchant(None)
        validate_token.return_value = TokenValidationResult(valid=False, error="Token expired")

        response = await anon_client.get(
            f"/api/v1/public/products/{test_product.id}", params={"token": "stale"}
        )

        assert response.status_code == 200
        assert response.json()["_access_level"] == "public"
        assert response.json()["product_data"]["price"]["_locked"] is True

    @pytest.mark.asyncio
    async def test_unknown_gated_field_fails_closed(self, anon_client, as_merchant, test_org):
        product = make_mock_product(
            organization_id=test_org.id,
            product_data={"product_name": "X", "moq": "500kg pack"},
            field_permissions={"product_name": "public", "moq": "vip_only"},
        )
        as_merchant(None, product=product)

        response = await anon_client.get(f"/api/v1/public/products/{product.id}")

        moq = response.json()["product_data"]["moq"]
        assert moq["_locked"] is True
        assert moq["_required_level"] == "after_rfq"
        assert moq["_preview"] == "500kg..."


class TestMerchantPreview:
    @pytest.mark.asyncio
    async def test_merchant_sees_everything(self, api_client, as_merchant, test_product):
        as_merchant("member")

        response = await api_client.get(f"/api/v1/public/products/{test_product.id}")

        body = response.json()
        assert body["_access_source"] == "merchant"
        assert body["_access_level"] == "after_rfq"
        assert body["_filtered"] is False
        assert body["product_data"]["price"] == 120

    @pytest.mark.asyncio
    async def test_token_takes_priority_over_membership(
        self, api_client, as_merchant, test_product, validate_token
    ):
        as_merchant("owner")
        validate_token.return_value = _valid(AccessLevel.PUBLIC, channel_id="preview")

        response = await api_client.get(
            f"/api/v1/public/products/{test_product.id}", params={"token": "b" * 64}
        )

        assert response.json()["_access_level"] == "public"
        assert response.json()["_access_source"] == "token"

    @pytest.mark.asyncio
    async def test_merchant_previews_draft(self, api_client, as_merchant, test_org):
        draft = make_mock_product(organization_id=test_org.id, status="draft")
        as_merchant("member", product=draft)

        response = await api_client.get(f"/api/v1/public/products/{draft.id}")
        assert response.status_code == 200


class TestNotFound:
    @pytest.mark.asyncio
    async def test_draft_hidden_from_buyers(self, anon_client, as_merchant, test_org):
        draft = make_mock_product(organization_id=test_org.id, status="draft")
        as_merchant(None, product=draft)

        response = await anon_client.get(f"/api/v1/public/products/{draft.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_product(self, anon_client):
        with patch.object(product_ops, "get", new_callable=AsyncMock, return_value=None):
            response = await anon_client.get(f"/api/v1/public/products/{uuid.uuid4()}")
        assert response.status_code == 404
