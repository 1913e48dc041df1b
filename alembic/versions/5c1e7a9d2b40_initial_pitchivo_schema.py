"""initial_pitchivo_schema

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-18 09:12:04.318220

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.Uuid(),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp(name: str, nullable: bool = False, default: bool = True) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()") if default else None,
        nullable=nullable,
    )


def upgrade() -> None:
    # 1. Users and organizations
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("auth_provider", sa.String(length=50), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at", nullable=True, default=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)

    op.create_table(
        "organizations",
        _id_column(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at", nullable=True, default=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"], unique=True)
    op.create_index("ix_organizations_owner_id", "organizations", ["owner_id"], unique=False)

    op.create_table(
        "organization_members",
        _id_column(),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(length=20), server_default="member", nullable=False),
        _timestamp("joined_at"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("organization_id", "user_id", name="uq_org_member"),
    )
    op.create_index(
        "ix_organization_members_organization_id",
        "organization_members",
        ["organization_id"],
        unique=False,
    )
    op.create_index(
        "ix_organization_members_user_id", "organization_members", ["user_id"], unique=False
    )

    # 2. Products
    op.create_table(
        "products",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "industry_code",
            sa.String(length=50),
            server_default="food_supplement",
            nullable=False,
        ),
        sa.Column(
            "organization_id",
            sa.UUID(),
            nullable=False,
            comment="Organization that owns this product",
        ),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default="draft",
            nullable=False,
            comment="Publication state: 'draft' | 'published'",
        ),
        sa.Column(
            "product_data",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
            comment="Extracted/edited specification fields",
        ),
        sa.Column(
            "field_permissions",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
            comment="Per-field minimum access level",
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_id", "products", ["id"], unique=False)
    op.create_index("ix_products_name", "products", ["name"], unique=False)
    op.create_index("ix_products_status", "products", ["status"], unique=False)
    op.create_index(
        "ix_products_organization_id", "products", ["organization_id"], unique=False
    )

    # 3. Access tokens (secrets stored as SHA-256 hex only)
    op.create_table(
        "product_access_tokens",
        _id_column(),
        sa.Column("product_id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("channel_id", sa.String(length=100), nullable=False),
        sa.Column("channel_name", sa.String(length=255), nullable=True),
        sa.Column(
            "access_level",
            sa.String(length=20),
            server_default="after_click",
            nullable=False,
        ),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_revoked", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("use_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("first_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bound_ip", sa.String(length=45), nullable=True),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "access_level IN ('public', 'after_click', 'after_rfq')",
            name="ck_product_access_tokens_access_level",
        ),
    )
    op.create_index(
        "ix_product_access_tokens_token_hash",
        "product_access_tokens",
        ["token_hash"],
        unique=True,
    )
    op.create_index(
        "ix_product_access_tokens_product_id",
        "product_access_tokens",
        ["product_id"],
        unique=False,
    )
    op.create_index(
        "ix_product_access_tokens_organization_id",
        "product_access_tokens",
        ["organization_id"],
        unique=False,
    )

    # 4. RFQs
    op.create_table(
        "product_rfqs",
        _id_column(),
        sa.Column("product_id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("message", sa.String(length=5000), nullable=False),
        sa.Column("quantity", sa.String(length=255), nullable=True),
        sa.Column("target_date", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="new", nullable=False),
        sa.Column("response_message", sa.String(length=5000), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_by", sa.UUID(), nullable=True),
        _timestamp("submitted_at"),
        _timestamp("updated_at", nullable=True, default=False),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["responded_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_product_rfqs_product_id", "product_rfqs", ["product_id"], unique=False)
    op.create_index(
        "ix_product_rfqs_organization_id", "product_rfqs", ["organization_id"], unique=False
    )
    op.create_index("ix_product_rfqs_email", "product_rfqs", ["email"], unique=False)
    op.create_index("ix_product_rfqs_status", "product_rfqs", ["status"], unique=False)

    # 5. Visit and action tracking
    op.create_table(
        "product_access_logs",
        _id_column(),
        sa.Column("product_id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("access_method", sa.String(length=20), nullable=False),
        sa.Column("channel_id", sa.String(length=100), nullable=True),
        sa.Column("channel_name", sa.String(length=255), nullable=True),
        sa.Column("session_id", sa.String(length=255), nullable=False),
        sa.Column("visitor_id", sa.String(length=255), nullable=True),
        sa.Column("is_unique_visit", sa.Boolean(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=1000), nullable=True),
        sa.Column("referrer", sa.String(length=2000), nullable=True),
        sa.Column("utm_source", sa.String(length=255), nullable=True),
        sa.Column("utm_medium", sa.String(length=255), nullable=True),
        sa.Column("utm_campaign", sa.String(length=255), nullable=True),
        sa.Column("country_code", sa.String(length=2), nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("device_type", sa.String(length=50), nullable=True),
        _timestamp("accessed_at"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_product_access_logs_product_id", "product_access_logs", ["product_id"], unique=False
    )
    op.create_index(
        "ix_product_access_logs_organization_id",
        "product_access_logs",
        ["organization_id"],
        unique=False,
    )
    op.create_index(
        "ix_product_access_logs_session_id", "product_access_logs", ["session_id"], unique=False
    )
    op.create_index(
        "ix_product_access_logs_visitor_id", "product_access_logs", ["visitor_id"], unique=False
    )

    op.create_table(
        "product_access_actions",
        _id_column(),
        sa.Column("access_id", sa.UUID(), nullable=False),
        sa.Column("product_id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("action_type", sa.String(length=30), nullable=False),
        sa.Column("action_target", sa.String(length=255), nullable=True),
        sa.Column(
            "action_metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["access_id"], ["product_access_logs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_product_access_actions_access_id",
        "product_access_actions",
        ["access_id"],
        unique=False,
    )
    op.create_index(
        "ix_product_access_actions_product_id",
        "product_access_actions",
        ["product_id"],
        unique=False,
    )
    op.create_index(
        "ix_product_access_actions_action_type",
        "product_access_actions",
        ["action_type"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("product_access_actions")
    op.drop_table("product_access_logs")
    op.drop_table("product_rfqs")
    op.drop_table("product_access_tokens")
    op.drop_table("products")
    op.drop_table("organization_members")
    op.drop_table("organizations")
    op.drop_table("users")
