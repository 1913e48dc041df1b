"""Unit tests for organization access control dependencies."""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from app.api.deps.organization import get_current_organization

from tests.helpers.mock_factories import make_mock_organization, make_mock_user


class TestGetCurrentOrganization:
    """Tests for org resolution from query param or membership."""

    @pytest.mark.asyncio
    @patch("app.api.deps.organization.organization_ops")
    async def test_explicit_org_for_member(self, mock_ops):
        org = make_mock_organization()
        mock_ops.is_member = AsyncMock(return_value=True)
        mock_ops.get = AsyncMock(return_value=org)

        result = await get_current_organization(org.id, make_mock_user(), AsyncMock())
        assert result is org

    @pytest.mark.asyncio
    @patch("app.api.deps.organization.organization_ops")
    async def test_explicit_org_for_non_member(self, mock_ops):
        mock_ops.is_member = AsyncMock(return_value=False)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_organization(uuid.uuid4(), make_mock_user(), AsyncMock())
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    @patch("app.api.deps.organization.organization_ops")
    async def test_explicit_org_missing(self, mock_ops):
        mock_ops.is_member = AsyncMock(return_value=True)
        mock_ops.get = AsyncMock(return_value=None)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_organization(uuid.uuid4(), make_mock_user(), AsyncMock())
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    @patch("app.api.deps.organization.organization_ops")
    async def test_defaults_to_first_org(self, mock_ops):
        first, second = make_mock_organization(), make_mock_organization()
        mock_ops.get_for_user = AsyncMock(return_value=[first, second])

        result = await get_current_organization(None, make_mock_user(), AsyncMock())
        assert result is first

    @pytest.mark.asyncio
    @patch("app.api.deps.organization.organization_ops")
    async def test_no_org(self, mock_ops):
        mock_ops.get_for_user = AsyncMock(return_value=[])

        with pytest.raises(HTTPException) as exc_info:
            await get_current_organization(None, make_mock_user(), AsyncMock())
        assert exc_info.value.status_code == 403
