"""Public product pages - tiered, token-aware product views for buyers."""

import uuid as uuid_pkg
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_optional, is_merchant_for
from app.config.access_levels import get_access_level_label
from app.core.database import get_db
from app.domain import organization_ops, product_ops
from app.models.product import Product
from app.models.user import User
from app.services.access_resolver import determine_access_level
from app.services.field_filtering import filter_product_object

router = APIRouter(prefix="/public", tags=["public"])


def serialize_product(product: Product) -> dict[str, Any]:
    """Plain-dict view of a product, prior to filtering."""
    return {
        "id": str(product.id),
        "organization_id": str(product.organization_id),
        "name": product.name,
        "industry_code": product.industry_code,
        "status": product.status,
        "product_data": product.product_data or {},
        "field_permissions": product.field_permissions or {},
    }


@router.get("/products/{product_id}")
async def get_public_product(
    product_id: uuid_pkg.UUID,
    token: str | None = None,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Get a product page filtered to the viewer's access level.

    Access comes from the ``token`` query parameter, then organization
    membership, then defaults to public. Unpublished products are only
    visible to merchants.
    """
    product = await product_ops.get(db, product_id)
    is_merchant = bool(product) and await is_merchant_for(db, product, current_user)
    if not product or (not product.is_published and not is_merchant):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    resolution = await determine_access_level(
        db,
        token=token,
        is_merchant=is_merchant,
        product_id=product.id,
    )

    filtered = filter_product_object(serialize_product(product), resolution.access_level) or {}

    org = await organization_ops.get(db, product.organization_id)
    return {
        **filtered,
        "organization_name": org.name if org else None,
        "organization_domain": org.domain if org else None,
        "_access_source": resolution.source.value,
        "_access_label": get_access_level_label(resolution.access_level),
        "_channel_id": resolution.channel_id,
    }
