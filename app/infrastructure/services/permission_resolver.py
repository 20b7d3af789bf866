"""Resolves user permissions from the user's role (implements IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import UserRole
from app.infrastructure.persistence.repositories.user_repo import UserRepository

ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.OWNER: frozenset({"*:*"}),
    UserRole.ADMIN: frozenset({"*:*"}),
    UserRole.MANAGER: frozenset(
        {
            "task:*",
            "taskpool:*",
            "activity:*",
            "audit:read",
            "user:read",
        }
    ),
    UserRole.STAFF: frozenset(
        {
            "task:create",
            "task:read",
            "task:update",
            "taskpool:read",
            "taskpool:claim",
            "activity:read",
            "activity:create",
            "user:read",
        }
    ),
}


def permissions_for_role(role: UserRole | None) -> set[str]:
    """Permission codes granted by role; unknown or missing role grants nothing."""
    if role is None:
        return set()
    return set(ROLE_PERMISSIONS.get(role, frozenset()))


class PermissionResolver:
    """Resolves user permissions by looking up the user's role in the tenant.

    Inactive users resolve to no permissions (get_roles only returns active users).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes for user in tenant."""
        roles = await self.user_repo.get_roles(tenant_id, {user_id})
        return permissions_for_role(roles.get(user_id))
