"""Security: JWT and password hashing."""

from app.infrastructure.security.jwt import (
    TokenClaims,
    create_access_token,
    decode_access_token,
    verify_token,
)
from app.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "TokenClaims",
    "create_access_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
