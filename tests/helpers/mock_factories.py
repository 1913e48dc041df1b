"""Mock object factories for unit tests.

Creates consistent mock objects that match the real model shapes.
Used in unit tests where the database is fully mocked.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock


def make_mock_user(**overrides: object) -> MagicMock:
    user = MagicMock()
    user.id = overrides.get("id", uuid.uuid4())
    user.email = overrides.get("email", "merchant@example.com")
    user.display_name = overrides.get("display_name", "Test Merchant")
    user.avatar_url = overrides.get("avatar_url")
    user.auth_provider = overrides.get("auth_provider", "email")
    user.created_at = overrides.get("created_at", datetime.now(UTC))
    user.updated_at = overrides.get("updated_at")
    return user


def make_mock_organization(**overrides: object) -> MagicMock:
    org = MagicMock()
    org.id = overrides.get("id", uuid.uuid4())
    org.name = overrides.get("name", "__test_supplier")
    org.slug = overrides.get("slug", "__test-supplier")
    org.domain = overrides.get("domain", "supplier.example.com")
    org.owner_id = overrides.get("owner_id", uuid.uuid4())
    org.created_at = overrides.get("created_at", datetime.now(UTC))
    org.updated_at = overrides.get("updated_at")
    return org


def make_mock_product(**overrides: object) -> MagicMock:
    product = MagicMock()
    product.id = overrides.get("id", uuid.uuid4())
    product.organization_id = overrides.get("organization_id", uuid.uuid4())
    product.created_by = overrides.get("created_by")
    product.name = overrides.get("name", "Vitamin C 1000mg")
    product.industry_code = overrides.get("industry_code", "food_supplement")
    product.status = overrides.get("status", "published")
    product.is_published = product.status == "published"
    product.product_data = overrides.get(
        "product_data",
        {"product_name": "Vitamin C 1000mg", "category": "Vitamins", "price": 120},
    )
    product.field_permissions = overrides.get(
        "field_permissions",
        {"product_name": "public", "category": "public", "price": "after_click"},
    )
    product.created_at = overrides.get("created_at", datetime.now(UTC))
    product.updated_at = overrides.get("updated_at", datetime.now(UTC))
    return product


def make_mock_access_token(**overrides: object) -> MagicMock:
    token = MagicMock()
    token.id = overrides.get("id", uuid.uuid4())
    token.product_id = overrides.get("product_id", uuid.uuid4())
    token.organization_id = overrides.get("organization_id", uuid.uuid4())
    token.channel_id = overrides.get("channel_id", "email_campaign")
    token.channel_name = overrides.get("channel_name", "Email Campaign")
    token.access_level = overrides.get("access_level", "after_click")
    token.token_hash = overrides.get("token_hash", "0" * 64)
    token.expires_at = overrides.get("expires_at", datetime.now(UTC) + timedelta(days=30))
    token.is_revoked = overrides.get("is_revoked", False)
    token.use_count = overrides.get("use_count", 0)
    token.first_used_at = overrides.get("first_used_at")
    token.last_used_at = overrides.get("last_used_at")
    token.bound_ip = overrides.get("bound_ip")
    token.created_by = overrides.get("created_by")
    token.notes = overrides.get("notes")
    token.created_at = overrides.get("created_at", datetime.now(UTC))
    return token


def make_mock_rfq(**overrides: object) -> MagicMock:
    rfq = MagicMock()
    rfq.id = overrides.get("id", uuid.uuid4())
    rfq.product_id = overrides.get("product_id", uuid.uuid4())
    rfq.organization_id = overrides.get("organization_id", uuid.uuid4())
    rfq.name = overrides.get("name", "Jane Buyer")
    rfq.email = overrides.get("email", "buyer@example.com")
    rfq.company = overrides.get("company", "Buyer Co")
    rfq.phone = overrides.get("phone")
    rfq.message = overrides.get("message", "Please quote 10,000 units delivered to Rotterdam.")
    rfq.quantity = overrides.get("quantity", "10000")
    rfq.target_date = overrides.get("target_date")
    rfq.status = overrides.get("status", "new")
    rfq.response_message = overrides.get("response_message")
    rfq.responded_at = overrides.get("responded_at")
    rfq.responded_by = overrides.get("responded_by")
    rfq.submitted_at = overrides.get("submitted_at", datetime.now(UTC))
    rfq.updated_at = overrides.get("updated_at")
    return rfq


def make_mock_access_log(**overrides: object) -> MagicMock:
    log = MagicMock()
    log.id = overrides.get("id", uuid.uuid4())
    log.product_id = overrides.get("product_id", uuid.uuid4())
    log.organization_id = overrides.get("organization_id", uuid.uuid4())
    log.access_method = overrides.get("access_method", "url")
    log.channel_id = overrides.get("channel_id")
    log.session_id = overrides.get("session_id", "sess-123")
    log.visitor_id = overrides.get("visitor_id")
    log.is_unique_visit = overrides.get("is_unique_visit", True)
    log.accessed_at = overrides.get("accessed_at", datetime.now(UTC))
    return log


def mock_scalars_result(values: list) -> MagicMock:
    """Create a mock execute() result that yields values via .scalars().all()."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    result.scalars.return_value.first.return_value = values[0] if values else None
    return result


def mock_scalar_result(value: object) -> MagicMock:
    """Create a mock execute() result that yields a single value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


def make_mock_db() -> AsyncMock:
    """AsyncSession mock whose begin_nested() works as an async context manager."""
    db = AsyncMock()
    db.add = MagicMock()

    @asynccontextmanager
    async def _savepoint():
        yield

    db.begin_nested = MagicMock(side_effect=lambda: _savepoint())
    return db
