"""Access tracking models - product page visits and on-page actions."""

import uuid as uuid_pkg
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import Column, DateTime, ForeignKey, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, SQLModel

# Column width of product_access_logs.user_agent
USER_AGENT_MAX_LENGTH = 1000


class AccessMethod(str, Enum):
    """How a visitor reached a product page."""

    URL = "url"
    QR_CODE = "qr_code"


class ActionType(str, Enum):
    """Trackable visitor actions on a product page."""

    PAGE_VIEW = "page_view"
    FIELD_REVEAL = "field_reveal"
    DOCUMENT_VIEW = "document_view"
    DOCUMENT_DOWNLOAD = "document_download"
    RFQ_SUBMIT = "rfq_submit"
    EMAIL_CLICK = "email_click"
    PHONE_CLICK = "phone_click"
    LINK_CLICK = "link_click"
    SHARE_CLICK = "share_click"


class AccessLog(SQLModel, table=True):
    """One product page visit."""

    __tablename__ = "product_access_logs"

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

    access_method: str = Field(max_length=20)
    channel_id: str | None = Field(default=None, max_length=100)
    channel_name: str | None = Field(default=None, max_length=255)
    session_id: str = Field(max_length=255, index=True)
    visitor_id: str | None = Field(default=None, max_length=255, index=True)
    is_unique_visit: bool = Field(default=True, nullable=False)

    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, max_length=USER_AGENT_MAX_LENGTH)
    referrer: str | None = Field(default=None, max_length=2000)
    utm_source: str | None = Field(default=None, max_length=255)
    utm_medium: str | None = Field(default=None, max_length=255)
    utm_campaign: str | None = Field(default=None, max_length=255)
    country_code: str | None = Field(default=None, max_length=2)
    city: str | None = Field(default=None, max_length=255)
    device_type: str | None = Field(default=None, max_length=50)

    accessed_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )


class AccessAction(SQLModel, table=True):
    """One visitor action, attached to the visit it happened in."""

    __tablename__ = "product_access_actions"

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )
    access_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("product_access_logs.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
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
        ),
    )
    action_type: str = Field(max_length=30, index=True)
    action_target: str | None = Field(default=None, max_length=255)
    action_metadata: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    )

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )


# Request/Response schemas
class AccessLogCreate(SQLModel):
    """Schema for tracking a page visit."""

    product_id: uuid_pkg.UUID
    access_method: AccessMethod
    session_id: str = Field(min_length=1, max_length=255)
    channel_id: str | None = Field(default=None, max_length=100)
    channel_name: str | None = Field(default=None, max_length=255)
    visitor_id: str | None = Field(default=None, max_length=255)
    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, max_length=USER_AGENT_MAX_LENGTH)
    referrer: str | None = Field(default=None, max_length=2000)
    utm_source: str | None = Field(default=None, max_length=255)
    utm_medium: str | None = Field(default=None, max_length=255)
    utm_campaign: str | None = Field(default=None, max_length=255)
    country_code: str | None = Field(default=None, max_length=2)
    city: str | None = Field(default=None, max_length=255)
    device_type: str | None = Field(default=None, max_length=50)


class AccessActionCreate(SQLModel):
    """Schema for tracking a visitor action."""

    access_id: uuid_pkg.UUID
    product_id: uuid_pkg.UUID
    action_type: ActionType
    action_target: str | None = Field(default=None, max_length=255)
    action_metadata: dict[str, Any] = Field(default_factory=dict)
