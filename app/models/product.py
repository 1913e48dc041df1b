import uuid as uuid_pkg
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

from app.models.access_token import AccessLevel
from app.models.base import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.access_token import AccessToken
    from app.models.organization import Organization
    from app.models.rfq import ProductRfq


class ProductStatus(str, Enum):
    """Publication state of a product page."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ProductBase(SQLModel):
    """Base fields shared across Product schemas."""

    name: str = Field(max_length=255, index=True)
    industry_code: str = Field(default="food_supplement", max_length=50)


class ProductCreate(SQLModel):
    """Schema for creating a product."""

    name: str = Field(min_length=1, max_length=255)
    industry_code: str = Field(default="food_supplement", max_length=50)
    product_data: dict[str, Any] = Field(default_factory=dict)
    field_permissions: dict[str, AccessLevel] = Field(default_factory=dict)


class ProductUpdate(SQLModel):
    """Schema for updating a product."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    industry_code: str | None = Field(default=None, max_length=50)
    product_data: dict[str, Any] | None = None
    field_permissions: dict[str, AccessLevel] | None = None


class Product(ProductBase, UUIDMixin, TimestampMixin, table=True):
    """Product page - supplier specification data shared with buyers."""

    __tablename__ = "products"

    organization_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
            comment="Organization that owns this product",
        ),
    )
    created_by: uuid_pkg.UUID | None = Field(
        default=None,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    status: str = Field(
        default=ProductStatus.DRAFT.value,
        max_length=20,
        index=True,
        sa_column_kwargs={"comment": "Publication state: 'draft' | 'published'"},
    )

    product_data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, comment="Extracted/edited specification fields"),
    )
    # field name -> minimum AccessLevel value required to view it
    field_permissions: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, comment="Per-field minimum access level"),
    )

    # Relationships
    organization: Optional["Organization"] = Relationship(back_populates="products")
    access_tokens: list["AccessToken"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    rfqs: list["ProductRfq"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def is_published(self) -> bool:
        return self.status == ProductStatus.PUBLISHED.value


class ProductRead(SQLModel):
    """Full product as seen by merchants."""

    id: uuid_pkg.UUID
    organization_id: uuid_pkg.UUID
    name: str
    industry_code: str
    status: str
    product_data: dict[str, Any]
    field_permissions: dict[str, str]
    created_at: datetime
    updated_at: datetime


class ProductWithCounts(ProductRead):
    """Merchant product view with the number of fields gated at each level."""

    field_counts: dict[str, int]
