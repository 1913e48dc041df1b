"""Security utilities for access token generation and hashing."""

import hashlib
import secrets

from app.config import settings


def generate_access_token(num_bytes: int | None = None) -> str:
    """Generate a cryptographically secure token for product share links.

    Defaults to 32 bytes (256 bits), returned as a 64-character hex string.
    """
    return secrets.token_hex(num_bytes or settings.access_token_bytes)


def hash_access_token(token: str) -> str:
    """Return the SHA-256 hex digest of a token.

    Only this digest is stored; the plaintext never touches the database.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
