"""Domain operations for product visit and action tracking."""

import uuid as uuid_pkg
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.access_log import AccessAction, AccessLog, ActionType


class AccessLogOperations:
    """Record product page visits and the actions taken during them."""

    async def get(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> AccessLog | None:
        """Get a visit by ID."""
        statement = select(AccessLog).where(AccessLog.id == id)  # type: ignore[arg-type]
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def is_first_visit(
        self,
        db: AsyncSession,
        product_id: uuid_pkg.UUID,
        visitor_id: str | None,
    ) -> bool:
        """True if this visitor has never been logged on this product.

        Anonymous visits (no visitor id) always count as unique.
        """
        if not visitor_id:
            return True
        statement = (
            select(func.count())
            .select_from(AccessLog)
            .where(
                AccessLog.product_id == product_id,  # type: ignore[arg-type]
                AccessLog.visitor_id == visitor_id,  # type: ignore[arg-type]
            )
        )
        result = await db.execute(statement)
        return (result.scalar() or 0) == 0

    async def log_access(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
        obj_in: dict[str, Any],
    ) -> AccessLog:
        """Insert a visit record."""
        is_unique = await self.is_first_visit(db, obj_in["product_id"], obj_in.get("visitor_id"))
        log = AccessLog(
            **obj_in,
            organization_id=organization_id,
            is_unique_visit=is_unique,
        )
        db.add(log)
        await db.flush()
        await db.refresh(log)
        return log

    async def get_latest_for_session(
        self,
        db: AsyncSession,
        product_id: uuid_pkg.UUID,
        session_id: str,
    ) -> AccessLog | None:
        """Most recent visit of a browser session on a product."""
        statement = (
            select(AccessLog)
            .where(
                AccessLog.product_id == product_id,  # type: ignore[arg-type]
                AccessLog.session_id == session_id,  # type: ignore[arg-type]
            )
            .order_by(AccessLog.accessed_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def log_action(
        self,
        db: AsyncSession,
        access_log: AccessLog,
        product_id: uuid_pkg.UUID,
        action_type: ActionType,
        action_target: str | None = None,
        action_metadata: dict[str, Any] | None = None,
    ) -> AccessAction:
        """Insert an action attached to a visit."""
        action = AccessAction(
            access_id=access_log.id,
            product_id=product_id,
            organization_id=access_log.organization_id,
            action_type=action_type.value,
            action_target=action_target,
            action_metadata=action_metadata or {},
        )
        db.add(action)
        await db.flush()
        await db.refresh(action)
        return action


access_log_ops = AccessLogOperations()
