"""Access token model - hashed, channel-attributed product share links."""

import uuid as uuid_pkg
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import EmailStr
from sqlalchemy import Column, DateTime, ForeignKey, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.product import Product


class AccessLevel(str, Enum):
    """Ordered access tiers for product field visibility.

    Higher tiers include every privilege of the lower ones:
    public < after_click < after_rfq.
    """

    PUBLIC = "public"  # Anyone browsing the catalog
    AFTER_CLICK = "after_click"  # Holders of a marketing link
    AFTER_RFQ = "after_rfq"  # Buyers who submitted an RFQ, and merchants

    @property
    def rank(self) -> int:
        return _ACCESS_LEVEL_RANK[self]

    def includes(self, required: "AccessLevel") -> bool:
        """True if this level may view content gated at ``required``."""
        return self.rank >= required.rank

    @classmethod
    def parse(
        cls,
        value: "AccessLevel | str | None",
        default: "AccessLevel | None" = None,
    ) -> "AccessLevel":
        """Coerce a stored string to an AccessLevel.

        Unknown or missing values resolve to ``default`` (public unless given).
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return default if default is not None else cls.PUBLIC

    @classmethod
    def highest(cls) -> "AccessLevel":
        return cls.AFTER_RFQ


_ACCESS_LEVEL_RANK: dict[AccessLevel, int] = {
    AccessLevel.PUBLIC: 0,
    AccessLevel.AFTER_CLICK: 1,
    AccessLevel.AFTER_RFQ: 2,
}


class AccessToken(SQLModel, table=True):
    """
    Product access token - a shareable link secret, stored only as a hash.

    Each token is attributed to a distribution channel (email campaign, QR
    code, RFQ upgrade, ...) and grants a fixed access level. Tokens are never
    deleted; revocation flips ``is_revoked``.
    """

    __tablename__ = "product_access_tokens"

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )
    product_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    organization_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )

    # Channel attribution
    channel_id: str = Field(max_length=100, nullable=False)
    channel_name: str | None = Field(default=None, max_length=255)

    access_level: str = Field(
        default=AccessLevel.AFTER_CLICK.value,
        sa_column=Column(String(20), nullable=False, server_default="after_click"),
    )
    # SHA-256 hex digest of the plaintext secret
    token_hash: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True),
    )

    expires_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
    is_revoked: bool = Field(
        default=False,
        nullable=False,
        sa_column_kwargs={"server_default": text("false")},
    )

    # Usage tracking (best-effort, updated on each successful validation)
    use_count: int = Field(
        default=0,
        nullable=False,
        sa_column_kwargs={"server_default": text("0")},
    )
    first_used_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
    last_used_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )

    bound_ip: str | None = Field(default=None, max_length=45)
    created_by: uuid_pkg.UUID | None = Field(
        default=None,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    notes: str | None = Field(default=None, max_length=1000)

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )

    # Relationships
    product: Optional["Product"] = Relationship(back_populates="access_tokens")


# Request/Response schemas
class AccessTokenGenerate(SQLModel):
    """Schema for generating a channel token."""

    product_id: uuid_pkg.UUID
    channel_id: str = Field(min_length=1, max_length=100)
    channel_name: str | None = Field(default=None, max_length=255)
    access_level: AccessLevel
    expires_in_days: int | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=1000)


class AccessTokenGenerated(SQLModel):
    """Response for a freshly generated token. The only time ``token`` is returned."""

    success: bool = True
    token: str
    token_id: uuid_pkg.UUID
    url: str
    access_level: AccessLevel
    channel_id: str
    expires_in_days: int | None = None


class AccessTokenRead(SQLModel):
    """Token metadata for listings. Never includes the secret or its hash."""

    id: uuid_pkg.UUID
    product_id: uuid_pkg.UUID
    channel_id: str
    channel_name: str | None
    access_level: str
    expires_at: datetime | None
    is_revoked: bool
    use_count: int
    first_used_at: datetime | None
    last_used_at: datetime | None
    created_by: uuid_pkg.UUID | None
    notes: str | None
    created_at: datetime


class AccessTokenRefresh(SQLModel):
    """Schema for requesting a fresh link for a previous RFQ."""

    product_id: uuid_pkg.UUID
    email: EmailStr
