"""Merchant access dependencies.

A merchant is any member of the organization that owns a product.
"""

import uuid as uuid_pkg
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.domain.organization_operations import ADMIN_ROLES, organization_ops
from app.domain.product_operations import product_ops
from app.models.product import Product
from app.models.user import User

from .auth import get_current_user


@dataclass
class MerchantContext:
    """A product together with the current user's role in its organization."""

    product: Product
    user: User
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


async def is_merchant_for(db: AsyncSession, product: Product, user: User | None) -> bool:
    """True if ``user`` belongs to the organization that owns ``product``."""
    if user is None:
        return False
    return await organization_ops.is_member(db, product.organization_id, user.id)


async def load_merchant_context(
    db: AsyncSession,
    product_id: uuid_pkg.UUID,
    user: User,
) -> MerchantContext:
    """
    Load a product the user manages.

    Raises 404 if the product does not exist.
    Raises 403 if the user is not a member of the product's organization.
    """
    product = await product_ops.get(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    role = await organization_ops.get_member_role(db, product.organization_id, user.id)
    if not role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to manage this product",
        )

    return MerchantContext(product=product, user=user, role=role)


async def get_merchant_product(
    product_id: uuid_pkg.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MerchantContext:
    """Dependency form of ``load_merchant_context`` for ``/{product_id}`` routes."""
    return await load_merchant_context(db, product_id, current_user)


async def require_product_admin(
    ctx: MerchantContext = Depends(get_merchant_product),
) -> MerchantContext:
    """Require org admin/owner on the product's organization."""
    if not ctx.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin or owner access required",
        )
    return ctx
