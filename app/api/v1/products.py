"""Product management API for merchants: CRUD, permissions and publishing."""

import uuid as uuid_pkg
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    MerchantContext,
    get_current_organization,
    get_current_user,
    get_merchant_product,
    require_product_admin,
)
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.domain import product_ops
from app.models.access_token import AccessLevel
from app.models.organization import Organization
from app.models.product import (
    ProductCreate,
    ProductRead,
    ProductStatus,
    ProductUpdate,
    ProductWithCounts,
)
from app.models.user import User
from app.services.field_filtering import get_field_counts, validate_public_fields

router = APIRouter(prefix="/products", tags=["products"])


def _check_permissions(permissions: dict[str, AccessLevel] | None) -> None:
    """Reject permission maps that hide fields which must stay public."""
    if not permissions:
        return
    violations = validate_public_fields(permissions)
    if violations:
        raise ValidationError("; ".join(violations))


def _to_read(product: Any) -> ProductWithCounts:
    base = ProductRead.model_validate(product, from_attributes=True)
    return ProductWithCounts(
        **base.model_dump(), field_counts=get_field_counts(product.field_permissions or {})
    )


@router.get("/", response_model=list[ProductWithCounts])
async def list_products(
    skip: int = 0,
    limit: int = 100,
    status_filter: ProductStatus | None = None,
    current_org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    """List the current organization's products."""
    products = await product_ops.get_by_organization(
        db,
        current_org.id,
        skip=skip,
        limit=limit,
        status=status_filter.value if status_filter else None,
    )
    return [_to_read(p) for p in products]


@router.post("/", response_model=ProductWithCounts, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_user),
    current_org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    """Create a draft product in the current organization."""
    _check_permissions(data.field_permissions)
    product = await product_ops.create_for_org(
        db,
        obj_in=data.model_dump(),
        organization_id=current_org.id,
        created_by=current_user.id,
    )
    return _to_read(product)


@router.get("/{product_id}", response_model=ProductWithCounts)
async def get_product(
    ctx: MerchantContext = Depends(get_merchant_product),
):
    """Get a product with all fields (merchant view)."""
    return _to_read(ctx.product)


@router.patch("/{product_id}", response_model=ProductWithCounts)
async def update_product(
    data: ProductUpdate,
    ctx: MerchantContext = Depends(get_merchant_product),
    db: AsyncSession = Depends(get_db),
):
    """Update product fields or field permissions."""
    _check_permissions(data.field_permissions)
    product = await product_ops.update_product(
        db, ctx.product, data.model_dump(exclude_unset=True)
    )
    return _to_read(product)


@router.post("/{product_id}/publish", response_model=ProductWithCounts)
async def publish_product(
    ctx: MerchantContext = Depends(require_product_admin),
    db: AsyncSession = Depends(get_db),
):
    """Make a product page publicly reachable."""
    product = await product_ops.set_status(db, ctx.product, ProductStatus.PUBLISHED)
    return _to_read(product)


@router.post("/{product_id}/unpublish", response_model=ProductWithCounts)
async def unpublish_product(
    ctx: MerchantContext = Depends(require_product_admin),
    db: AsyncSession = Depends(get_db),
):
    """Return a product to draft."""
    product = await product_ops.set_status(db, ctx.product, ProductStatus.DRAFT)
    return _to_read(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid_pkg.UUID,
    ctx: MerchantContext = Depends(require_product_admin),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a product along with its tokens and RFQs."""
    await product_ops.delete(db, id=product_id, organization_id=ctx.product.organization_id)
