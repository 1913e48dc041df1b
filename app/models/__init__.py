from app.models.access_log import (
    AccessAction,
    AccessActionCreate,
    AccessLog,
    AccessLogCreate,
    AccessMethod,
    ActionType,
)
from app.models.access_token import (
    AccessLevel,
    AccessToken,
    AccessTokenGenerate,
    AccessTokenGenerated,
    AccessTokenRead,
    AccessTokenRefresh,
)
from app.models.organization import (
    MemberRole,
    Organization,
    OrganizationCreate,
    OrganizationMember,
    OrganizationRead,
)
from app.models.product import (
    Product,
    ProductCreate,
    ProductRead,
    ProductStatus,
    ProductUpdate,
    ProductWithCounts,
)
from app.models.rfq import (
    ProductRfq,
    RfqPage,
    RfqRead,
    RfqStatus,
    RfqStatusUpdate,
    RfqSubmit,
    RfqSubmitted,
)
from app.models.user import User

__all__ = [
    "User",
    "Organization",
    "OrganizationMember",
    "OrganizationCreate",
    "OrganizationRead",
    "MemberRole",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "ProductRead",
    "ProductWithCounts",
    "ProductStatus",
    "AccessLevel",
    "AccessToken",
    "AccessTokenGenerate",
    "AccessTokenGenerated",
    "AccessTokenRead",
    "AccessTokenRefresh",
    "ProductRfq",
    "RfqSubmit",
    "RfqSubmitted",
    "RfqStatus",
    "RfqStatusUpdate",
    "RfqRead",
    "RfqPage",
    "AccessLog",
    "AccessLogCreate",
    "AccessAction",
    "AccessActionCreate",
    "AccessMethod",
    "ActionType",
]
