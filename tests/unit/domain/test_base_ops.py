"""Unit tests for BaseOperations — generic CRUD with all DB calls mocked.

Uses ProductRfq as the concrete type since BaseOperations requires a
real SQLModel class for select() to build valid query expressions.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.base_operations import BaseOperations
from app.models.rfq import ProductRfq

from tests.helpers.mock_factories import make_mock_db, mock_scalar_result


class TestBaseGet:
    """Tests for BaseOperations.get() and get_by_org()."""

    def setup_method(self):
        self.ops = BaseOperations(ProductRfq)
        self.db = AsyncMock()

    @pytest.mark.asyncio
    async def test_get_returns_record(self):
        record = MagicMock()
        self.db.execute = AsyncMock(return_value=mock_scalar_result(record))

        assert await self.ops.get(self.db, uuid.uuid4()) == record

    @pytest.mark.asyncio
    async def test_get_returns_none_when_not_found(self):
        self.db.execute = AsyncMock(return_value=mock_scalar_result(None))

        assert await self.ops.get(self.db, uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_get_by_org_returns_none_for_other_org(self):
        self.db.execute = AsyncMock(return_value=mock_scalar_result(None))

        assert await self.ops.get_by_org(self.db, uuid.uuid4(), uuid.uuid4()) is None


class TestBaseUpdate:
    """Tests for BaseOperations.update()."""

    def setup_method(self):
        self.ops = BaseOperations(ProductRfq)
        self.db = make_mock_db()

    @pytest.mark.asyncio
    async def test_applies_all_keys_including_none(self):
        record = MagicMock()
        record.phone = "+44 20 0000 0000"

        await self.ops.update(self.db, record, {"status": "in_progress", "phone": None})

        assert record.status == "in_progress"
        assert record.phone is None
        self.db.flush.assert_awaited_once()
        self.db.refresh.assert_awaited_once_with(record)


class TestBaseDelete:
    """Tests for BaseOperations.delete()."""

    def setup_method(self):
        self.ops = BaseOperations(ProductRfq)
        self.db = make_mock_db()

    @pytest.mark.asyncio
    async def test_delete_existing(self):
        record = MagicMock()
        self.db.execute = AsyncMock(return_value=mock_scalar_result(record))

        assert await self.ops.delete(self.db, uuid.uuid4(), uuid.uuid4()) is True
        self.db.delete.assert_awaited_once_with(record)

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        self.db.execute = AsyncMock(return_value=mock_scalar_result(None))

        assert await self.ops.delete(self.db, uuid.uuid4(), uuid.uuid4()) is False
        self.db.delete.assert_not_awaited()
