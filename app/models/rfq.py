"""RFQ model - buyer requests for quotation on a product."""

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


class RfqStatus(str, Enum):
    """Merchant-side handling state of an RFQ."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESPONDED = "responded"
    WON = "won"
    LOST = "lost"
    ARCHIVED = "archived"


# Statuses that record who responded and when
RESPONSE_STATUSES = frozenset({RfqStatus.RESPONDED, RfqStatus.WON})


class ProductRfq(SQLModel, table=True):
    """
    Product RFQ - a buyer's request for quotation.

    Submitting an RFQ upgrades the buyer to after_rfq access via a
    freshly issued token.
    """

    __tablename__ = "product_rfqs"

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

    # Buyer details
    name: str = Field(max_length=255)
    email: str = Field(max_length=255, index=True)
    company: str = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    message: str = Field(max_length=5000)
    quantity: str | None = Field(default=None, max_length=255)
    target_date: str | None = Field(default=None, max_length=50)

    status: str = Field(
        default=RfqStatus.NEW.value,
        sa_column=Column(String(20), nullable=False, server_default="new", index=True),
    )
    response_message: str | None = Field(default=None, max_length=5000)
    responded_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
    responded_by: uuid_pkg.UUID | None = Field(
        default=None,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    submitted_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
    updated_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": text("now()")},
    )

    # Relationships
    product: Optional["Product"] = Relationship(back_populates="rfqs")


# Request/Response schemas
class RfqSubmit(SQLModel):
    """Schema for a buyer submitting an RFQ."""

    product_id: uuid_pkg.UUID
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    company: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    message: str = Field(min_length=10, max_length=5000)
    quantity: str | None = Field(default=None, max_length=255)
    target_date: str | None = Field(default=None, max_length=50)
    session_id: str | None = Field(default=None, max_length=255)


class RfqSubmitted(SQLModel):
    """Response after RFQ submission, carrying the after_rfq upgrade link."""

    success: bool = True
    message: str = "RFQ submitted successfully"
    rfq_id: uuid_pkg.UUID
    token: str | None = None
    url: str | None = None


class RfqStatusUpdate(SQLModel):
    """Schema for a merchant changing RFQ status."""

    status: RfqStatus
    response_message: str | None = Field(default=None, max_length=5000)


class RfqRead(SQLModel):
    """RFQ as shown in the merchant inbox."""

    id: uuid_pkg.UUID
    product_id: uuid_pkg.UUID
    organization_id: uuid_pkg.UUID
    name: str
    email: str
    company: str
    phone: str | None
    message: str
    quantity: str | None
    target_date: str | None
    status: str
    response_message: str | None
    responded_at: datetime | None
    responded_by: uuid_pkg.UUID | None
    submitted_at: datetime
    updated_at: datetime | None


class RfqPage(SQLModel):
    """Paginated RFQ listing."""

    rfqs: list[RfqRead]
    total_count: int
    page: int
    page_size: int
    total_pages: int
