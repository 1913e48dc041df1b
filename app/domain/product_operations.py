import uuid as uuid_pkg
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.base_operations import BaseOperations
from app.models.access_token import AccessLevel
from app.models.product import Product, ProductStatus


def serialize_permissions(permissions: dict[str, AccessLevel | str]) -> dict[str, str]:
    """Store permissions as plain level strings (JSONB)."""
    return {name: AccessLevel(level).value for name, level in permissions.items()}


class ProductOperations(BaseOperations[Product]):
    """CRUD operations for Product model."""

    def __init__(self) -> None:
        super().__init__(Product)

    async def get_by_organization(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
        skip: int = 0,
        limit: int = 100,
        status: str | None = None,
    ) -> list[Product]:
        """Get products owned by an organization, newest first."""
        statement = select(Product).where(
            Product.organization_id == organization_id  # type: ignore[arg-type]
        )
        if status:
            statement = statement.where(Product.status == status)  # type: ignore[arg-type]
        statement = statement.order_by(Product.created_at.desc()).offset(skip).limit(limit)  # type: ignore[attr-defined]
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_published(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> Product | None:
        """Get a product only if it is published."""
        statement = select(Product).where(
            Product.id == id,  # type: ignore[arg-type]
            Product.status == ProductStatus.PUBLISHED.value,  # type: ignore[arg-type]
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def create_for_org(
        self,
        db: AsyncSession,
        obj_in: dict[str, Any],
        organization_id: uuid_pkg.UUID,
        created_by: uuid_pkg.UUID,
    ) -> Product:
        """Create a draft product in an organization."""
        data = dict(obj_in)
        data["field_permissions"] = serialize_permissions(data.get("field_permissions") or {})
        return await self.create(
            db,
            obj_in={**data, "organization_id": organization_id, "created_by": created_by},
        )

    async def update_product(
        self,
        db: AsyncSession,
        product: Product,
        obj_in: dict[str, Any],
    ) -> Product:
        """Apply a partial update, normalizing permissions if present."""
        data = dict(obj_in)
        if data.get("field_permissions") is not None:
            data["field_permissions"] = serialize_permissions(data["field_permissions"])
        return await self.update(db, product, data)

    async def set_status(
        self,
        db: AsyncSession,
        product: Product,
        status: ProductStatus,
    ) -> Product:
        """Publish or unpublish a product."""
        return await self.update(db, product, {"status": status.value})


product_ops = ProductOperations()
