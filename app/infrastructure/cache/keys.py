"""Cache key builders. Single place for key format.

Key components (tenant_id, code, user_id) must not contain CACHE_KEY_SEP
to avoid ambiguous or colliding keys.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_TENANT,
)


def _join(prefix: str, *components: tuple[str, str]) -> str:
    for value, name in components:
        if CACHE_KEY_SEP in value:
            raise ValueError(
                f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
            )
    return CACHE_KEY_SEP.join([prefix, *(value for value, _ in components)])


def tenant_key(tenant_id: str) -> str:
    """Cache key for tenant by ID."""
    return _join(CACHE_PREFIX_TENANT, ("id", "kind"), (tenant_id, "tenant_id"))


def tenant_code_key(code: str) -> str:
    """Cache key for tenant by login code."""
    return _join(CACHE_PREFIX_TENANT, ("code", "kind"), (code, "code"))


def tenant_valid_key(tenant_id: str) -> str:
    """Cache key for X-Tenant-ID header validation (hit or miss marker)."""
    return _join(CACHE_PREFIX_TENANT, ("valid", "kind"), (tenant_id, "tenant_id"))

