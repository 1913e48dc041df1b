"""Effective access level resolution for product page requests.

First match wins:
1. A valid ``token`` query parameter grants the token's level.
2. A member of the owning organization (merchant) gets full access.
3. Everyone else is public.

An invalid token is not an error; the request simply falls through.
"""

import logging
import uuid as uuid_pkg
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.access_token_operations import access_token_ops
from app.models.access_token import AccessLevel

logger = logging.getLogger(__name__)


class AccessSource(str, Enum):
    """Where a resolved access level came from."""

    TOKEN = "token"
    MERCHANT = "merchant"
    PUBLIC = "public"


@dataclass
class AccessResolution:
    """Resolved access for one request."""

    access_level: AccessLevel
    source: AccessSource
    token_id: uuid_pkg.UUID | None = None
    channel_id: str | None = None


async def determine_access_level(
    db: AsyncSession,
    token: str | None,
    is_merchant: bool = False,
    product_id: uuid_pkg.UUID | None = None,
) -> AccessResolution:
    """Resolve the access level for a request by token, then merchant flag, then public."""
    if token:
        validation = await access_token_ops.validate_token(db, token, product_id)
        if validation.valid and validation.access_level is not None:
            return AccessResolution(
                access_level=validation.access_level,
                source=AccessSource.TOKEN,
                token_id=validation.token_id,
                channel_id=validation.channel_id,
            )
        logger.info(f"Rejected access token for product {product_id}: {validation.error}")

    if is_merchant:
        return AccessResolution(
            access_level=AccessLevel.highest(),
            source=AccessSource.MERCHANT,
        )

    return AccessResolution(access_level=AccessLevel.PUBLIC, source=AccessSource.PUBLIC)
