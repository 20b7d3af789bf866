"""AuthorizationService and role permission tests (mocked resolver and cache)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.services.authorization_service import AuthorizationService, grants
from app.domain.enums import UserRole
from app.domain.exceptions import AuthorizationException
from app.infrastructure.services.permission_resolver import permissions_for_role


class TestGrants:
    def test_exact_code(self) -> None:
        assert grants({"task:read"}, "task", "read")
        assert not grants({"task:read"}, "task", "delete")

    def test_resource_wildcard(self) -> None:
        assert grants({"taskpool:*"}, "taskpool", "manage")
        assert not grants({"taskpool:*"}, "task", "read")

    def test_global_wildcard(self) -> None:
        assert grants({"*:*"}, "audit", "read")

    def test_empty(self) -> None:
        assert not grants(set(), "task", "read")


class TestRolePermissions:
    @pytest.mark.parametrize("role", [UserRole.OWNER, UserRole.ADMIN])
    def test_administrators_have_everything(self, role: UserRole) -> None:
        perms = permissions_for_role(role)
        assert grants(perms, "task", "delete")
        assert grants(perms, "audit", "read")

    def test_manager_manages_pool_but_is_not_admin(self) -> None:
        perms = permissions_for_role(UserRole.MANAGER)
        assert grants(perms, "taskpool", "manage")
        assert grants(perms, "taskpool", "assign")
        assert grants(perms, "task", "view_all")
        assert grants(perms, "audit", "read")
        assert not grants(perms, "settings", "update")

    def test_staff_can_claim_but_not_assign(self) -> None:
        perms = permissions_for_role(UserRole.STAFF)
        assert grants(perms, "taskpool", "claim")
        assert grants(perms, "task", "update")
        assert not grants(perms, "taskpool", "assign")
        assert not grants(perms, "taskpool", "manage")
        assert not grants(perms, "task", "view_all")
        assert not grants(perms, "task", "delete")
        assert not grants(perms, "audit", "read")

    def test_missing_role_grants_nothing(self) -> None:
        assert permissions_for_role(None) == set()

    def test_returned_set_is_a_copy(self) -> None:
        perms = permissions_for_role(UserRole.STAFF)
        perms.add("*:*")
        assert "*:*" not in permissions_for_role(UserRole.STAFF)


@pytest.fixture
def resolver() -> AsyncMock:
    r = AsyncMock()
    r.get_user_permissions = AsyncMock(return_value={"task:read", "taskpool:claim"})
    return r


def _cache(available: bool = True, cached=None) -> MagicMock:
    cache = MagicMock()
    cache.is_available = MagicMock(return_value=available)
    cache.get = AsyncMock(return_value=cached)
    cache.set = AsyncMock()
    cache.delete = AsyncMock()
    return cache


async def test_check_permission_without_cache(resolver: AsyncMock) -> None:
    svc = AuthorizationService(resolver)
    assert await svc.check_permission("u1", "t1", "taskpool", "claim")
    assert not await svc.check_permission("u1", "t1", "taskpool", "assign")
    resolver.get_user_permissions.assert_awaited_with("u1", "t1")


async def test_cache_miss_populates_cache(resolver: AsyncMock) -> None:
    cache = _cache()
    svc = AuthorizationService(resolver, cache, cache_ttl=120)
    perms = await svc.get_user_permissions("u1", "t1")
    assert perms == {"task:read", "taskpool:claim"}
    cache.set.assert_awaited_once_with(
        "permission:t1:u1", ["task:read", "taskpool:claim"], ttl=120
    )


async def test_cache_hit_skips_resolver(resolver: AsyncMock) -> None:
    cache = _cache(cached=["*:*"])
    svc = AuthorizationService(resolver, cache)
    assert await svc.check_permission("u1", "t1", "audit", "read")
    resolver.get_user_permissions.assert_not_awaited()


async def test_unavailable_cache_is_ignored(resolver: AsyncMock) -> None:
    cache = _cache(available=False)
    svc = AuthorizationService(resolver, cache)
    await svc.get_user_permissions("u1", "t1")
    cache.get.assert_not_awaited()
    cache.set.assert_not_awaited()


async def test_require_permission_raises(resolver: AsyncMock) -> None:
    svc = AuthorizationService(resolver)
    with pytest.raises(AuthorizationException) as exc_info:
        await svc.require_permission("u1", "t1", "task", "delete")
    assert exc_info.value.details == {"resource": "task", "action": "delete"}


async def test_invalidate_user_cache(resolver: AsyncMock) -> None:
    cache = _cache()
    svc = AuthorizationService(resolver, cache)
    await svc.invalidate_user_cache("u1", "t1")
    cache.delete.assert_awaited_once_with("permission:t1:u1")
