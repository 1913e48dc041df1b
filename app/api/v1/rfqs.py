"""RFQ API: buyer submission and the merchant RFQ inbox."""

import logging
import math
import uuid as uuid_pkg

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_organization, get_current_user
from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.core.rate_limit import RFQ_SUBMIT_LIMIT, client_key, rate_limiter
from app.domain import access_log_ops, access_token_ops, organization_ops, product_ops, rfq_ops
from app.domain.access_token_operations import build_absolute_token_url
from app.models.access_log import ActionType
from app.models.organization import Organization
from app.models.product import Product
from app.models.rfq import (
    ProductRfq,
    RfqPage,
    RfqRead,
    RfqStatus,
    RfqStatusUpdate,
    RfqSubmit,
    RfqSubmitted,
)
from app.models.user import User
from app.services.email.rfq_notification import send_rfq_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rfqs", tags=["rfqs"])


async def _notify_owner(db: AsyncSession, product: Product, rfq: ProductRfq) -> None:
    """Email the organization owner. Delivery problems never fail the submission."""
    try:
        owner = await organization_ops.get_owner(db, product.organization_id)
        await send_rfq_notification(owner.email if owner else None, product.name, rfq)
    except Exception as e:
        logger.error(f"[rfq] Failed to send notification for RFQ {rfq.id}: {e}")


@router.post("/submit", response_model=RfqSubmitted, status_code=status.HTTP_201_CREATED)
async def submit_rfq(
    data: RfqSubmit,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Submit an RFQ for a published product.

    The response carries an after_rfq link that unlocks every field. If
    the link cannot be issued the RFQ is still recorded and the response
    simply has no link; the buyer can use /tokens/refresh later.
    """
    rate_limiter.check_rate_limit(client_key(request), "rfq_submit", RFQ_SUBMIT_LIMIT)

    product = await product_ops.get_published(db, data.product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    rfq = await rfq_ops.submit(
        db,
        product,
        data.model_dump(exclude={"product_id", "session_id"}),
    )
    logger.info(f"[rfq] New RFQ {rfq.id} for product {product.id}")

    if data.session_id:
        visit = await access_log_ops.get_latest_for_session(db, product.id, data.session_id)
        if visit:
            await access_log_ops.log_action(
                db,
                visit,
                product.id,
                ActionType.RFQ_SUBMIT,
                action_target=str(rfq.id),
            )

    token = await access_token_ops.create_rfq_upgrade_token(
        db,
        product_id=product.id,
        organization_id=product.organization_id,
        rfq_id=rfq.id,
    )
    if not token.success:
        logger.warning(f"[rfq] RFQ {rfq.id} recorded without upgrade link: {token.error}")

    await _notify_owner(db, product, rfq)

    base_url = request.headers.get("origin")
    return RfqSubmitted(
        rfq_id=rfq.id,
        token=token.token,
        url=build_absolute_token_url(token.url, base_url) if token.url else None,
    )


@router.get("/", response_model=RfqPage)
async def list_rfqs(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    status_filter: RfqStatus | None = Query(None, alias="status"),
    product_id: uuid_pkg.UUID | None = None,
    search: str | None = None,
    current_org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    """List the current organization's RFQs, newest first."""
    rfqs, total = await rfq_ops.list_for_org(
        db,
        current_org.id,
        status=status_filter.value if status_filter else None,
        product_id=product_id,
        search=search.strip() if search else None,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return RfqPage(
        rfqs=[RfqRead.model_validate(r, from_attributes=True) for r in rfqs],
        total_count=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.patch("/{rfq_id}", response_model=RfqRead)
async def update_rfq_status(
    rfq_id: uuid_pkg.UUID,
    data: RfqStatusUpdate,
    current_user: User = Depends(get_current_user),
    current_org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    """Change an RFQ's status. Responded and won record who responded."""
    rfq = await rfq_ops.get_by_org(db, organization_id=current_org.id, id=rfq_id)
    if not rfq:
        raise NotFoundError("RFQ")

    rfq = await rfq_ops.update_status(
        db,
        rfq,
        data.status,
        user_id=current_user.id,
        response_message=data.response_message,
    )
    return RfqRead.model_validate(rfq, from_attributes=True)
