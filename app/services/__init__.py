from app.services.access_resolver import AccessResolution, AccessSource, determine_access_level
from app.services.field_filtering import (
    can_view_field,
    filter_product_fields,
    filter_product_object,
    get_field_counts,
    get_field_preview,
    get_hidden_fields,
    validate_public_fields,
)

__all__ = [
    "AccessResolution",
    "AccessSource",
    "determine_access_level",
    "can_view_field",
    "filter_product_fields",
    "filter_product_object",
    "get_field_counts",
    "get_field_preview",
    "get_hidden_fields",
    "validate_public_fields",
]
