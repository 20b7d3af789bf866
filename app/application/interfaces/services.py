"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import Any, Protocol


class IPermissionResolver(Protocol):
    """Resolves permission codes for a user (used by AuthorizationService)."""

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes (e.g. {'task:create', 'taskpool:claim'})."""


class ICacheService(Protocol):
    """Minimal cache protocol for permission caching."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""

