"""Visit and action tracking for product pages (anonymous, from the browser)."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.domain import access_log_ops, product_ops
from app.models.access_log import USER_AGENT_MAX_LENGTH, AccessActionCreate, AccessLogCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.post("/access", status_code=status.HTTP_201_CREATED)
async def track_access(
    data: AccessLogCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Record a product page visit. Client IP and user agent default from the request."""
    product = await product_ops.get(db, data.product_id)
    if not product:
        raise NotFoundError("Product")

    payload = data.model_dump()
    payload["access_method"] = data.access_method.value
    if not payload.get("ip_address") and request.client:
        payload["ip_address"] = request.client.host
    if not payload.get("user_agent"):
        user_agent = request.headers.get("user-agent")
        payload["user_agent"] = user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None

    log = await access_log_ops.log_access(db, product.organization_id, payload)
    return {"success": True, "access_id": str(log.id), "is_unique_visit": log.is_unique_visit}


@router.post("/action", status_code=status.HTTP_201_CREATED)
async def track_action(
    data: AccessActionCreate,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Record an action taken during a logged visit."""
    visit = await access_log_ops.get(db, data.access_id)
    if not visit or visit.product_id != data.product_id:
        raise NotFoundError("Access log")

    action = await access_log_ops.log_action(
        db,
        visit,
        data.product_id,
        data.action_type,
        action_target=data.action_target,
        action_metadata=data.action_metadata,
    )
    return {"success": True, "action_id": str(action.id)}
