"""Authorization service: permission checks with optional caching (IPermissionResolver + cache)."""

from __future__ import annotations

from collections.abc import Iterable

from app.application.interfaces.services import ICacheService, IPermissionResolver
from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION
from app.domain.exceptions import AuthorizationException


def _permission_key(tenant_id: str, user_id: str) -> str:
    return CACHE_KEY_SEP.join((CACHE_PREFIX_PERMISSION, tenant_id, user_id))


def grants(permissions: Iterable[str], resource: str, action: str) -> bool:
    """Return True if permissions contain resource:action, resource:* or *:*."""
    codes = set(permissions)
    return (
        f"{resource}:{action}" in codes
        or f"{resource}:*" in codes
        or "*:*" in codes
    )


class AuthorizationService:
    """Centralized permission checking; uses cache when available (5 min TTL typical)."""

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes (e.g. task:create, taskpool:claim). Uses cache if available."""
        key = _permission_key(tenant_id, user_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return set(cached)

        permissions = await self.permission_resolver.get_user_permissions(
            user_id, tenant_id
        )
        if self.cache and self.cache.is_available():
            await self.cache.set(key, sorted(permissions), ttl=self.cache_ttl)
        return permissions

    async def check_permission(
        self,
        user_id: str,
        tenant_id: str,
        resource: str,
        action: str,
    ) -> bool:
        """Return True if user has resource:action or resource:* or *:*."""
        permissions = await self.get_user_permissions(user_id, tenant_id)
        return grants(permissions, resource, action)

    async def require_permission(
        self,
        user_id: str,
        tenant_id: str,
        resource: str,
        action: str,
    ) -> None:
        """Raise AuthorizationException if user lacks permission."""
        if not await self.check_permission(user_id, tenant_id, resource, action):
            raise AuthorizationException(resource=resource, action=action)

    async def invalidate_user_cache(self, user_id: str, tenant_id: str) -> None:
        """Invalidate cached permissions for one user (e.g. after a role change)."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(_permission_key(tenant_id, user_id))
