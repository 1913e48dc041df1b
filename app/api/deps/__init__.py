"""API dependencies - re-exports from submodules."""

from .auth import (
    CurrentUser,
    DbSession,
    OptionalUser,
    decode_supabase_token,
    get_current_user,
    get_current_user_optional,
    get_jwks,
    get_signing_key,
    security,
)
from .merchant import (
    MerchantContext,
    get_merchant_product,
    is_merchant_for,
    load_merchant_context,
    require_product_admin,
)
from .organization import get_current_organization

__all__ = [
    # Auth
    "security",
    "get_jwks",
    "get_signing_key",
    "decode_supabase_token",
    "get_current_user",
    "get_current_user_optional",
    "DbSession",
    "CurrentUser",
    "OptionalUser",
    # Organization
    "get_current_organization",
    # Merchant
    "MerchantContext",
    "get_merchant_product",
    "is_merchant_for",
    "load_merchant_context",
    "require_product_admin",
]
