"""Domain operations for Organization model."""

import re
import secrets
import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.organization import MemberRole, Organization, OrganizationMember
from app.models.user import User

# Roles allowed to publish/unpublish and delete products
ADMIN_ROLES = frozenset({MemberRole.OWNER.value, MemberRole.ADMIN.value})


def generate_slug(name: str) -> str:
    """Generate a URL-friendly slug from a name."""
    # Lowercase and replace spaces/special chars with hyphens
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    slug = slug.strip("-")
    # Add random suffix for uniqueness
    suffix = secrets.token_hex(3)
    return f"{slug}-{suffix}"


class OrganizationOperations:
    """CRUD and membership operations for Organization model."""

    async def get(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> Organization | None:
        """Get an organization by ID."""
        statement = select(Organization).where(Organization.id == id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_slug(
        self,
        db: AsyncSession,
        slug: str,
    ) -> Organization | None:
        """Get an organization by its slug."""
        statement = select(Organization).where(Organization.slug == slug)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
    ) -> list[Organization]:
        """Get all organizations a user is a member of (including owned)."""
        statement = (
            select(Organization)
            .join(OrganizationMember)
            .where(OrganizationMember.user_id == user_id)
            .order_by(Organization.created_at.desc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        name: str,
        owner_id: uuid_pkg.UUID,
        slug: str | None = None,
        domain: str | None = None,
    ) -> Organization:
        """Create an organization and an owner membership for its creator."""
        if not slug:
            slug = generate_slug(name)

        existing = await self.get_by_slug(db, slug)
        if existing:
            slug = generate_slug(name)  # Regenerate with new suffix

        org = Organization(name=name, slug=slug, owner_id=owner_id, domain=domain)
        db.add(org)
        await db.flush()

        member = OrganizationMember(
            organization_id=org.id,
            user_id=owner_id,
            role=MemberRole.OWNER.value,
        )
        db.add(member)

        await db.flush()
        await db.refresh(org)
        return org

    async def is_member(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
        user_id: uuid_pkg.UUID,
    ) -> bool:
        """Check if a user is a member of an organization."""
        return await self.get_member_role(db, organization_id, user_id) is not None

    async def get_member_role(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
        user_id: uuid_pkg.UUID,
    ) -> str | None:
        """Get a user's role in an organization."""
        statement = select(OrganizationMember.role).where(
            OrganizationMember.organization_id == organization_id,
            OrganizationMember.user_id == user_id,
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_owner(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
    ) -> User | None:
        """Get the owning user of an organization (RFQ notification recipient)."""
        statement = (
            select(User)
            .join(Organization, Organization.owner_id == User.id)
            .where(Organization.id == organization_id)
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()


organization_ops = OrganizationOperations()
