"""Server-side field filtering for tiered product access.

Restricted values never leave the server: a field gated above the viewer's
access level is replaced by a locked descriptor carrying only the required
level and a short preview, so the UI can render a lock affordance.

Unknown level strings fail closed. An unknown viewer level is treated as
public. An unknown field requirement is treated as the highest tier.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from app.config import settings
from app.models.access_token import AccessLevel

logger = logging.getLogger(__name__)

FieldPermissions = Mapping[str, AccessLevel | str]

# Fields that must always stay visible on a public product page
REQUIRED_PUBLIC_FIELDS: tuple[str, ...] = ("product_name", "category")

NUMBER_PREVIEW = "•••"
OBJECT_PREVIEW = "[Hidden]"


def _required_level(permissions: FieldPermissions, field_name: str) -> AccessLevel:
    """Minimum level for a field. Unlisted fields are public."""
    if field_name not in permissions:
        return AccessLevel.PUBLIC
    return AccessLevel.parse(permissions[field_name], default=AccessLevel.highest())


def can_view_field(
    user_level: AccessLevel | str,
    field_requirement: AccessLevel | str,
) -> bool:
    """Check if a viewer at ``user_level`` may see a field gated at ``field_requirement``."""
    viewer = AccessLevel.parse(user_level)
    required = AccessLevel.parse(field_requirement, default=AccessLevel.highest())
    return viewer.includes(required)


def get_field_preview(value: Any) -> str:
    """Build a non-revealing preview of a locked value.

    Strings are cut to a prefix, numbers masked, lists reduced to a count and
    objects to a placeholder.
    """
    if not value or isinstance(value, bool):
        return ""

    if isinstance(value, str):
        # Never the whole string: at most half of it, capped at the preview length
        shown = min(settings.locked_preview_length, len(value) // 2)
        return value[:shown] + "..."

    if isinstance(value, (int, float)):
        return NUMBER_PREVIEW

    if isinstance(value, (list, tuple)):
        count = len(value)
        return f"{count} item{'' if count == 1 else 's'}"

    if isinstance(value, Mapping):
        return OBJECT_PREVIEW

    return ""


def locked_field(required_level: AccessLevel, value: Any) -> dict[str, Any]:
    """Descriptor that stands in for a value the viewer may not see."""
    return {
        "_locked": True,
        "_required_level": required_level.value,
        "_preview": get_field_preview(value),
    }


def filter_product_fields(
    product_data: Any,
    permissions: FieldPermissions,
    user_access_level: AccessLevel | str,
    include_locked_fields: bool = True,
) -> Any:
    """Filter a product data object down to what ``user_access_level`` may see.

    Args:
        product_data: Field name -> value mapping. Non-mappings are returned as-is.
        permissions: Field name -> minimum access level. Unlisted fields are public.
        user_access_level: The viewer's resolved access level.
        include_locked_fields: If True, locked fields become descriptors
            (see ``locked_field``); otherwise they become None.

    Returns:
        ``product_data`` itself at after_rfq, otherwise a filtered copy.
    """
    if not isinstance(product_data, Mapping):
        return product_data

    level = AccessLevel.parse(user_access_level)
    if level == AccessLevel.highest():
        return product_data

    filtered: dict[str, Any] = {}
    for field_name, field_value in product_data.items():
        required = _required_level(permissions, field_name)
        if level.includes(required):
            filtered[field_name] = field_value
        elif include_locked_fields:
            filtered[field_name] = locked_field(required, field_value)
        else:
            filtered[field_name] = None

    return filtered


def get_hidden_fields(
    permissions: FieldPermissions,
    user_access_level: AccessLevel | str,
) -> list[str]:
    """Names of permission-listed fields hidden at ``user_access_level``."""
    level = AccessLevel.parse(user_access_level)
    return [
        field_name
        for field_name in permissions
        if not level.includes(_required_level(permissions, field_name))
    ]


def get_field_counts(permissions: FieldPermissions) -> dict[str, int]:
    """Count permission-listed fields per required level."""
    counts = {level.value: 0 for level in AccessLevel}
    for field_name in permissions:
        counts[_required_level(permissions, field_name).value] += 1
    return counts


def validate_public_fields(
    permissions: FieldPermissions,
    required_public_fields: tuple[str, ...] | list[str] = REQUIRED_PUBLIC_FIELDS,
) -> list[str]:
    """Return violations for fields that must stay public but are gated."""
    violations = []
    for field_name in required_public_fields:
        if field_name not in permissions:
            continue
        if _required_level(permissions, field_name) != AccessLevel.PUBLIC:
            violations.append(f"{field_name} must be public")
    return violations


def _load_product_data(raw: Any) -> dict[str, Any]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Failed to parse product_data, treating as empty")
            return {}
    return raw if isinstance(raw, dict) else {}


def _as_permissions(raw: Any) -> FieldPermissions:
    return raw if isinstance(raw, Mapping) else {}


def filter_product_object(
    product: Mapping[str, Any] | None,
    user_access_level: AccessLevel | str,
    include_locked_fields: bool = True,
) -> dict[str, Any] | None:
    """Filter a serialized product and annotate it with access metadata.

    Permissions come from ``product["field_permissions"]``, falling back to a
    ``field_permissions`` mapping embedded in ``product_data``. Anything that
    is not a mapping counts as no permissions.
    """
    if product is None:
        return None

    level = AccessLevel.parse(user_access_level)
    product_data = _load_product_data(product.get("product_data"))
    permissions = _as_permissions(product.get("field_permissions")) or _as_permissions(
        product_data.get("field_permissions")
    )

    filtered_data = filter_product_fields(
        product_data,
        permissions,
        level,
        include_locked_fields,
    )
    locked_fields = get_hidden_fields(permissions, level)

    return {
        **product,
        "product_data": filtered_data,
        "_access_level": level.value,
        "_filtered": level != AccessLevel.highest(),
        "_locked_fields": locked_fields,
        "_locked_count": len(locked_fields),
    }
