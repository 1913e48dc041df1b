"""Organization model - the supplier company and its team."""

import uuid as uuid_pkg
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.product import Product
    from app.models.user import User


class Organization(SQLModel, table=True):
    """
    Organization model - a supplier company.

    Organizations own products, access tokens and RFQs. Members of an
    organization are the "merchants" for its products.
    """

    __tablename__ = "organizations"

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )
    name: str = Field(max_length=100, nullable=False)
    slug: str = Field(max_length=100, unique=True, index=True, nullable=False)
    domain: str | None = Field(default=None, max_length=255)

    # Ownership - receives RFQ notifications
    owner_id: uuid_pkg.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    created_at: datetime = Field(  # type: ignore[call-overload]
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
    owner: Optional["User"] = Relationship(
        back_populates="owned_organizations",
        sa_relationship_kwargs={"foreign_keys": "[Organization.owner_id]"},
    )
    members: list["OrganizationMember"] = Relationship(
        back_populates="organization",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    products: list["Product"] = Relationship(back_populates="organization")


class MemberRole(str, Enum):
    """Role levels for organization members."""

    OWNER = "owner"  # Full access, can delete org
    ADMIN = "admin"  # Full access, can publish and delete products
    MEMBER = "member"  # Standard access: edit products, issue links, handle RFQs
    VIEWER = "viewer"  # Read-only


class OrganizationMember(SQLModel, table=True):
    """
    Organization membership - join table between users and organizations.
    """

    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_org_member"),
    )

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )
    organization_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    user_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    role: str = Field(
        default=MemberRole.MEMBER.value,
        sa_column=Column(String(20), nullable=False, server_default="member"),
    )
    joined_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )

    # Relationships
    organization: Optional["Organization"] = Relationship(back_populates="members")
    user: Optional["User"] = Relationship(
        back_populates="organization_memberships",
        sa_relationship_kwargs={"foreign_keys": "[OrganizationMember.user_id]"},
    )


# Request/Response schemas
class OrganizationCreate(SQLModel):
    """Schema for creating a supplier organization."""

    name: str = Field(min_length=1, max_length=100)
    domain: str | None = Field(default=None, max_length=255)


class OrganizationRead(SQLModel):
    """Organization as returned to its members."""

    id: uuid_pkg.UUID
    name: str
    slug: str
    domain: str | None
    owner_id: uuid_pkg.UUID
    created_at: datetime
