"""Domain operations for product RFQs."""

import uuid as uuid_pkg
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.base_operations import BaseOperations
from app.models.product import Product
from app.models.rfq import RESPONSE_STATUSES, ProductRfq, RfqStatus


class RfqOperations(BaseOperations[ProductRfq]):
    """Create, list and update RFQs."""

    def __init__(self) -> None:
        super().__init__(ProductRfq)

    async def submit(
        self,
        db: AsyncSession,
        product: Product,
        obj_in: dict[str, Any],
    ) -> ProductRfq:
        """Record a buyer RFQ against a product."""
        return await self.create(
            db,
            obj_in={
                **obj_in,
                "product_id": product.id,
                "organization_id": product.organization_id,
            },
        )

    async def get_latest_for_email(
        self,
        db: AsyncSession,
        product_id: uuid_pkg.UUID,
        email: str,
    ) -> ProductRfq | None:
        """Most recent RFQ a buyer submitted for a product."""
        statement = (
            select(ProductRfq)
            .where(
                ProductRfq.product_id == product_id,  # type: ignore[arg-type]
                func.lower(ProductRfq.email) == email.lower(),
            )
            .order_by(ProductRfq.submitted_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def list_for_org(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
        status: str | None = None,
        product_id: uuid_pkg.UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[ProductRfq], int]:
        """List an organization's RFQs, newest first, with a total count."""
        conditions = [ProductRfq.organization_id == organization_id]
        if status:
            conditions.append(ProductRfq.status == status)
        if product_id:
            conditions.append(ProductRfq.product_id == product_id)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    ProductRfq.name.ilike(pattern),  # type: ignore[attr-defined]
                    ProductRfq.email.ilike(pattern),  # type: ignore[attr-defined]
                    ProductRfq.company.ilike(pattern),  # type: ignore[attr-defined]
                    ProductRfq.message.ilike(pattern),  # type: ignore[attr-defined]
                )
            )

        count_statement = select(func.count()).select_from(ProductRfq).where(*conditions)
        total = (await db.execute(count_statement)).scalar() or 0

        statement = (
            select(ProductRfq)
            .where(*conditions)
            .order_by(ProductRfq.submitted_at.desc())  # type: ignore[attr-defined]
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all()), total

    async def update_status(
        self,
        db: AsyncSession,
        rfq: ProductRfq,
        status: RfqStatus,
        user_id: uuid_pkg.UUID,
        response_message: str | None = None,
    ) -> ProductRfq:
        """Move an RFQ to a new status.

        Responded/won stamps the responder and time, and stores the
        response message when given.
        """
        updates: dict[str, Any] = {"status": status.value}
        if status in RESPONSE_STATUSES:
            updates["responded_at"] = datetime.now(UTC)
            updates["responded_by"] = user_id
            if response_message:
                updates["response_message"] = response_message
        return await self.update(db, rfq, updates)


rfq_ops = RfqOperations()
