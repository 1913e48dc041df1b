"""Organization API: the supplier companies a merchant belongs to."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.domain import organization_ops
from app.models.organization import OrganizationCreate, OrganizationRead
from app.models.user import User

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("/", response_model=list[OrganizationRead])
async def list_my_organizations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List organizations the current user is a member of."""
    orgs = await organization_ops.get_for_user(db, current_user.id)
    return [OrganizationRead.model_validate(o, from_attributes=True) for o in orgs]


@router.post("/", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
async def create_organization(
    data: OrganizationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create an organization owned by the current user."""
    org = await organization_ops.create(
        db,
        name=data.name,
        owner_id=current_user.id,
        domain=data.domain,
    )
    return OrganizationRead.model_validate(org, from_attributes=True)
