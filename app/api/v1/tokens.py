"""Access token API: issue, list, revoke and refresh product share links."""

import logging
import uuid as uuid_pkg
from dataclasses import asdict
from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, load_merchant_context
from app.config import settings
from app.config.access_levels import ACCESS_LEVEL_CONFIG, CHANNEL_PRESETS
from app.core.database import get_db
from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.rate_limit import TOKEN_REFRESH_LIMIT, client_key, rate_limiter
from app.domain import access_token_ops, product_ops, rfq_ops
from app.domain.access_token_operations import (
    TokenCreateParams,
    TokenCreationResult,
    build_absolute_token_url,
)
from app.models.access_token import (
    AccessLevel,
    AccessTokenGenerate,
    AccessTokenGenerated,
    AccessTokenRead,
    AccessTokenRefresh,
)
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tokens", tags=["tokens"])


def _base_url(request: Request) -> str:
    """Frontend origin for absolute links; the caller's Origin wins over config."""
    return request.headers.get("origin") or settings.frontend_url


def _raise_on_failure(result: TokenCreationResult) -> None:
    if not result.success or not result.token or not result.url or not result.token_id:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or "Failed to create token",
        )


@router.post("/generate", response_model=AccessTokenGenerated)
async def generate_token(
    data: AccessTokenGenerate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Issue a channel token for a product.

    The secret is returned once in this response and never again.
    """
    ctx = await load_merchant_context(db, data.product_id, current_user)

    result = await access_token_ops.create_token(
        db,
        TokenCreateParams(
            product_id=ctx.product.id,
            organization_id=ctx.product.organization_id,
            channel_id=data.channel_id,
            channel_name=data.channel_name,
            access_level=data.access_level,
            expires_in_days=data.expires_in_days,
            created_by=current_user.id,
            notes=data.notes,
        ),
    )
    _raise_on_failure(result)

    return AccessTokenGenerated(
        token=result.token,  # type: ignore[arg-type]
        token_id=result.token_id,  # type: ignore[arg-type]
        url=build_absolute_token_url(result.url, _base_url(request)),  # type: ignore[arg-type]
        access_level=data.access_level,
        channel_id=data.channel_id,
        expires_in_days=data.expires_in_days,
    )


@router.get("/presets")
async def get_presets() -> dict[str, Any]:
    """Channel presets and access level display config for the share dialog."""
    return {
        "presets": [asdict(p) for p in CHANNEL_PRESETS],
        "access_levels": [asdict(c) for c in ACCESS_LEVEL_CONFIG.values()],
    }


@router.get("/products/{product_id}", response_model=list[AccessTokenRead])
async def list_product_tokens(
    product_id: uuid_pkg.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List token metadata for a product. Secrets are never returned."""
    ctx = await load_merchant_context(db, product_id, current_user)
    tokens = await access_token_ops.get_for_product(db, ctx.product.id)
    return [AccessTokenRead.model_validate(t, from_attributes=True) for t in tokens]


@router.post("/{token_id}/revoke")
async def revoke_token(
    token_id: uuid_pkg.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Revoke a token. Only members of the token's organization may revoke it."""
    token = await access_token_ops.get(db, token_id)
    if not token:
        raise NotFoundError("Token")

    ctx = await load_merchant_context(db, token.product_id, current_user)
    result = await access_token_ops.revoke_token(db, token_id, ctx.product.organization_id)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or "Failed to revoke token",
        )
    return {"success": True, "token_id": str(token_id)}


@router.post("/refresh", response_model=AccessTokenGenerated)
async def refresh_token(
    data: AccessTokenRefresh,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Re-issue an after_rfq link for a buyer whose RFQ link was lost or expired.

    The buyer proves nothing but their email, so this endpoint is rate
    limited per client and only honours RFQs within the refresh window.
    """
    rate_limiter.check_rate_limit(client_key(request), "token_refresh", TOKEN_REFRESH_LIMIT)

    product = await product_ops.get_published(db, data.product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    rfq = await rfq_ops.get_latest_for_email(db, product.id, data.email)
    if not rfq:
        raise NotFoundError("RFQ for this email")

    window = timedelta(days=settings.rfq_refresh_window_days)
    if rfq.submitted_at < datetime.now(UTC) - window:
        raise ForbiddenError("RFQ is too old to refresh access. Please submit a new RFQ.")

    result = await access_token_ops.create_rfq_upgrade_token(
        db,
        product_id=product.id,
        organization_id=product.organization_id,
        rfq_id=rfq.id,
        channel_prefix="rfq_refresh",
        channel_name="RFQ Access Refresh",
        notes=f"Refreshed access for RFQ: {rfq.id}",
    )
    _raise_on_failure(result)
    logger.info(f"Refreshed after_rfq access for RFQ {rfq.id} on product {product.id}")

    return AccessTokenGenerated(
        token=result.token,  # type: ignore[arg-type]
        token_id=result.token_id,  # type: ignore[arg-type]
        url=build_absolute_token_url(result.url, _base_url(request)),  # type: ignore[arg-type]
        access_level=AccessLevel.AFTER_RFQ,
        channel_id=f"rfq_refresh_{rfq.id}",
        expires_in_days=settings.rfq_token_expiry_days,
    )
