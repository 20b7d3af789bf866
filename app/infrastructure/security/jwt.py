"""JWT access tokens for authentication.

Tokens carry sub (user id), tenant_id, role and sid (login session id,
recorded on audit log rows). Secret and algorithm come from Settings.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, validated access-token claims."""

    user_id: str
    tenant_id: str
    role: str | None
    session_id: str | None
    expires_at: datetime


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (sub, tenant_id, role, sid).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.
    """
    settings = get_settings()
    to_encode = data.copy()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = datetime.now(UTC) + ttl
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, or missing exp/sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    return payload


def decode_access_token(token: str) -> TokenClaims:
    """Verify token and return typed claims.

    Raises:
        ValueError: If the token is invalid or has no tenant_id.
    """
    payload = verify_token(token)
    tenant_id = payload.get("tenant_id")
    if not tenant_id:
        raise ValueError("Token missing required claim: tenant_id")
    return TokenClaims(
        user_id=str(payload["sub"]),
        tenant_id=str(tenant_id),
        role=payload.get("role"),
        session_id=payload.get("sid"),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
    )
