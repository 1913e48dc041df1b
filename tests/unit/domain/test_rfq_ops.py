"""Unit tests for RfqOperations — submission, lookup, listing and status changes."""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.domain.rfq_operations import RfqOperations
from app.models.rfq import ProductRfq, RfqStatus

from tests.helpers.mock_factories import (
    make_mock_db,
    make_mock_product,
    make_mock_rfq,
    mock_scalar_result,
    mock_scalars_result,
)


class TestSubmit:
    def setup_method(self):
        self.ops = RfqOperations()
        self.db = make_mock_db()

    @pytest.mark.asyncio
    async def test_scopes_rfq_to_product_and_org(self):
        product = make_mock_product()

        rfq = await self.ops.submit(
            self.db,
            product,
            {
                "name": "Jane",
                "email": "jane@buyer.com",
                "company": "Buyer Co",
                "message": "Need 5 tonnes by March",
            },
        )

        assert isinstance(rfq, ProductRfq)
        assert rfq.product_id == product.id
        assert rfq.organization_id == product.organization_id
        assert rfq.status == "new"
        self.db.add.assert_called_once_with(rfq)
        self.db.flush.assert_awaited_once()


class TestGetLatestForEmail:
    def setup_method(self):
        self.ops = RfqOperations()
        self.db = AsyncMock()

    @pytest.mark.asyncio
    async def test_returns_most_recent(self):
        latest = make_mock_rfq()
        self.db.execute = AsyncMock(return_value=mock_scalars_result([latest]))

        result = await self.ops.get_latest_for_email(self.db, uuid.uuid4(), "Buyer@Example.com")
        assert result is latest

    @pytest.mark.asyncio
    async def test_none_when_no_rfq(self):
        self.db.execute = AsyncMock(return_value=mock_scalars_result([]))

        result = await self.ops.get_latest_for_email(self.db, uuid.uuid4(), "x@y.com")
        assert result is None


class TestListForOrg:
    def setup_method(self):
        self.ops = RfqOperations()
        self.db = AsyncMock()

    @pytest.mark.asyncio
    async def test_returns_page_and_total(self):
        rfqs = [make_mock_rfq(), make_mock_rfq()]
        self.db.execute = AsyncMock(
            side_effect=[mock_scalar_result(12), mock_scalars_result(rfqs)]
        )

        result, total = await self.ops.list_for_org(
            self.db,
            uuid.uuid4(),
            status="new",
            product_id=uuid.uuid4(),
            search="vitamin",
            skip=10,
            limit=2,
        )

        assert result == rfqs
        assert total == 12
        assert self.db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_total(self):
        self.db.execute = AsyncMock(
            side_effect=[mock_scalar_result(None), mock_scalars_result([])]
        )

        result, total = await self.ops.list_for_org(self.db, uuid.uuid4())

        assert result == []
        assert total == 0


class TestUpdateStatus:
    def setup_method(self):
        self.ops = RfqOperations()
        self.db = make_mock_db()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [RfqStatus.RESPONDED, RfqStatus.WON])
    async def test_response_statuses_stamp_responder(self, status):
        rfq = make_mock_rfq()
        user_id = uuid.uuid4()

        with patch.object(self.ops, "update", new_callable=AsyncMock) as mock_update:
            await self.ops.update_status(self.db, rfq, status, user_id, "Quoted $4/kg")

        updates = mock_update.call_args[0][2]
        assert updates["status"] == status.value
        assert updates["responded_by"] == user_id
        assert updates["responded_at"] is not None
        assert updates["response_message"] == "Quoted $4/kg"

    @pytest.mark.asyncio
    async def test_other_statuses_only_change_status(self):
        rfq = make_mock_rfq()

        with patch.object(self.ops, "update", new_callable=AsyncMock) as mock_update:
            await self.ops.update_status(self.db, rfq, RfqStatus.ARCHIVED, uuid.uuid4())

        assert mock_update.call_args[0][2] == {"status": "archived"}
