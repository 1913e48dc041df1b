"""Domain operations for product access tokens.

Issues hashed share-link secrets, validates presented secrets, and revokes
tokens. Issuance and revocation report failure through result objects
instead of raising; validation fails closed.
"""

import asyncio
import logging
import uuid as uuid_pkg
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import async_session_maker
from app.core.security import generate_access_token, hash_access_token
from app.models.access_token import AccessLevel, AccessToken

logger = logging.getLogger(__name__)

# Strong references to in-flight usage updates so they are not garbage collected
_background_tasks: set[asyncio.Task] = set()


@dataclass
class TokenCreateParams:
    """Inputs for issuing a token."""

    product_id: uuid_pkg.UUID
    organization_id: uuid_pkg.UUID
    channel_id: str
    access_level: AccessLevel
    channel_name: str | None = None
    expires_in_days: int | None = None
    bound_ip: str | None = None
    created_by: uuid_pkg.UUID | None = None
    notes: str | None = None


@dataclass
class TokenCreationResult:
    """Outcome of issuing a token. ``token`` is the only copy of the secret."""

    success: bool
    token: str | None = None
    token_id: uuid_pkg.UUID | None = None
    url: str | None = None
    expires_at: datetime | None = None
    error: str | None = None


@dataclass
class TokenValidationResult:
    """Outcome of validating a presented token."""

    valid: bool
    access_level: AccessLevel | None = None
    token_id: uuid_pkg.UUID | None = None
    product_id: uuid_pkg.UUID | None = None
    channel_id: str | None = None
    error: str | None = None


@dataclass
class TokenOperationResult:
    """Outcome of a token mutation such as revocation."""

    success: bool
    error: str | None = None


def build_token_url(product_id: uuid_pkg.UUID, token: str) -> str:
    """Relative product link carrying a token."""
    return f"/products/{product_id}?token={token}"


def build_absolute_token_url(relative_url: str, base_url: str | None = None) -> str:
    """Prefix a relative token link with the frontend origin."""
    return f"{(base_url or settings.frontend_url).rstrip('/')}{relative_url}"


class AccessTokenOperations:
    """Issue, validate and revoke product access tokens."""

    async def get(
        self,
        db: AsyncSession,
        token_id: uuid_pkg.UUID,
    ) -> AccessToken | None:
        """Get a token record by ID."""
        statement = select(AccessToken).where(AccessToken.id == token_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_hash(
        self,
        db: AsyncSession,
        token_hash: str,
    ) -> AccessToken | None:
        """Get a token record by the hash of its secret."""
        statement = select(AccessToken).where(AccessToken.token_hash == token_hash)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_product(
        self,
        db: AsyncSession,
        product_id: uuid_pkg.UUID,
    ) -> list[AccessToken]:
        """All tokens for a product, newest first."""
        statement = (
            select(AccessToken)
            .where(AccessToken.product_id == product_id)
            .order_by(AccessToken.created_at.desc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create_token(
        self,
        db: AsyncSession,
        params: TokenCreateParams,
    ) -> TokenCreationResult:
        """
        Issue a new token and persist only its hash.

        ``expires_in_days=0`` yields a token that is already expired;
        ``None`` means it never expires. A persistence error is returned
        as ``success=False`` rather than raised.
        """
        token = generate_access_token()
        expires_at = None
        if params.expires_in_days is not None:
            expires_at = datetime.now(UTC) + timedelta(days=params.expires_in_days)

        record = AccessToken(
            product_id=params.product_id,
            organization_id=params.organization_id,
            channel_id=params.channel_id,
            channel_name=params.channel_name,
            access_level=AccessLevel(params.access_level).value,
            token_hash=hash_access_token(token),
            expires_at=expires_at,
            bound_ip=params.bound_ip,
            created_by=params.created_by,
            notes=params.notes,
        )

        # Savepoint: a failed insert must not discard the caller's pending work
        try:
            async with db.begin_nested():
                db.add(record)
                await db.flush()
            await db.refresh(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create access token for product {params.product_id}: {e}")
            return TokenCreationResult(success=False, error="Failed to create token")

        logger.info(
            f"Issued {record.access_level} token {record.id} for product "
            f"{params.product_id} (channel={params.channel_id})"
        )
        return TokenCreationResult(
            success=True,
            token=token,
            token_id=record.id,
            url=build_token_url(params.product_id, token),
            expires_at=expires_at,
        )

    async def create_rfq_upgrade_token(
        self,
        db: AsyncSession,
        product_id: uuid_pkg.UUID,
        organization_id: uuid_pkg.UUID,
        rfq_id: uuid_pkg.UUID,
        channel_prefix: str = "rfq",
        channel_name: str = "RFQ Submission",
        notes: str | None = None,
    ) -> TokenCreationResult:
        """Issue an after_rfq token for a buyer who submitted an RFQ."""
        return await self.create_token(
            db,
            TokenCreateParams(
                product_id=product_id,
                organization_id=organization_id,
                channel_id=f"{channel_prefix}_{rfq_id}",
                channel_name=channel_name,
                access_level=AccessLevel.AFTER_RFQ,
                expires_in_days=settings.rfq_token_expiry_days,
                notes=notes or f"Generated after RFQ submission: {rfq_id}",
            ),
        )

    async def validate_token(
        self,
        db: AsyncSession,
        token: str,
        product_id: uuid_pkg.UUID | None = None,
    ) -> TokenValidationResult:
        """
        Validate a presented secret.

        Fails closed when the token is unknown, revoked, expired or bound to
        another product. On success, usage counters are updated in a detached
        task whose failure never affects the returned result.
        """
        try:
            record = await self.get_by_hash(db, hash_access_token(token))
        except SQLAlchemyError as e:
            logger.error(f"Error validating access token: {e}")
            return TokenValidationResult(valid=False, error="Token validation failed")

        if record is None:
            return TokenValidationResult(valid=False, error="Invalid token")

        if record.is_revoked:
            return TokenValidationResult(valid=False, error="Token revoked")

        if record.expires_at is not None and record.expires_at <= datetime.now(UTC):
            return TokenValidationResult(valid=False, error="Token expired")

        if product_id is not None and record.product_id != product_id:
            return TokenValidationResult(valid=False, error="Token not valid for this product")

        self._schedule_usage_update(record.id)

        return TokenValidationResult(
            valid=True,
            access_level=AccessLevel.parse(record.access_level),
            token_id=record.id,
            product_id=record.product_id,
            channel_id=record.channel_id,
        )

    async def revoke_token(
        self,
        db: AsyncSession,
        token_id: uuid_pkg.UUID,
        organization_id: uuid_pkg.UUID,
    ) -> TokenOperationResult:
        """Revoke a token (soft delete). Revoking twice is a no-op."""
        statement = select(AccessToken).where(
            AccessToken.id == token_id,
            AccessToken.organization_id == organization_id,
        )
        try:
            result = await db.execute(statement)
            record = result.scalar_one_or_none()
            if record is None:
                return TokenOperationResult(success=False, error="Token not found")

            record.is_revoked = True
            db.add(record)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error revoking token {token_id}: {e}")
            return TokenOperationResult(success=False, error="Failed to revoke token")

        logger.info(f"Revoked token {token_id}")
        return TokenOperationResult(success=True)

    async def record_usage(self, token_id: uuid_pkg.UUID) -> None:
        """Increment usage counters on a fresh session.

        Counter arithmetic happens in SQL so concurrent validations of the
        same token do not lose increments.
        """
        now = datetime.now(UTC)
        try:
            async with async_session_maker() as session:
                await session.execute(
                    update(AccessToken)
                    .where(AccessToken.id == token_id)  # type: ignore[arg-type]
                    .values(
                        use_count=AccessToken.use_count + 1,
                        last_used_at=now,
                        first_used_at=func.coalesce(AccessToken.first_used_at, now),
                    )
                )
                await session.commit()
        except Exception as e:
            logger.error(f"Failed to update token usage for {token_id}: {e}")

    def _schedule_usage_update(self, token_id: uuid_pkg.UUID) -> None:
        """Fire-and-forget the usage update."""
        task = asyncio.create_task(
            self.record_usage(token_id),
            name=f"token-usage-{token_id}",
        )
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)


access_token_ops = AccessTokenOperations()
