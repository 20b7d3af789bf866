"""Tenant repository with optional caching. Returns application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.tenant import TenantResult
from app.domain.enums import TenantStatus
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import TenantCode
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_code_key, tenant_key
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    return TenantResult(id=t.id, code=t.code, name=t.name, status=TenantStatus(t.status))


def _tenant_to_dict(t: Tenant | TenantResult) -> dict[str, Any]:
    return {"id": t.id, "code": t.code, "name": t.name, "status": TenantStatus(t.status).value}


def _tenant_from_cached(cached: dict[str, Any]) -> TenantResult:
    return TenantResult(
        id=cached["id"],
        code=cached["code"],
        name=cached["name"],
        status=TenantStatus(cached["status"]),
    )


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository. Optional cache keyed by tenant_key/tenant_code_key."""

    resource_name = "tenant"

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        cache_ttl: int = 900,
    ) -> None:
        super().__init__(db, Tenant)
        self.cache = cache_service
        self.cache_ttl = cache_ttl

    def _cache_on(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_result(self, tenant_id: str) -> TenantResult | None:
        """Get tenant by ID, from cache if available."""
        if self._cache_on():
            cached = await self.cache.get(tenant_key(tenant_id))
            if cached is not None:
                return _tenant_from_cached(cached)
        tenant = await self.get_by_id(tenant_id)
        if tenant is None:
            return None
        if self._cache_on():
            await self.cache.set(tenant_key(tenant_id), _tenant_to_dict(tenant), ttl=self.cache_ttl)
        return _tenant_to_result(tenant)

    async def get_by_code(self, code: str) -> TenantResult | None:
        """Get tenant by unique login code, from cache if available."""
        if self._cache_on():
            cached = await self.cache.get(tenant_code_key(code))
            if cached is not None:
                return _tenant_from_cached(cached)
        result = await self.db.execute(select(Tenant).where(Tenant.code == code))
        tenant = result.scalar_one_or_none()
        if tenant is None:
            return None
        if self._cache_on():
            d = _tenant_to_dict(tenant)
            await self.cache.set(tenant_code_key(code), d, ttl=self.cache_ttl)
            await self.cache.set(tenant_key(tenant.id), d, ttl=self.cache_ttl)
        return _tenant_to_result(tenant)

    async def create_tenant(
        self, code: str, name: str, status: TenantStatus = TenantStatus.ACTIVE
    ) -> TenantResult:
        """Create tenant; raises ValidationException on an invalid or duplicate code."""
        try:
            valid_code = TenantCode(code)
        except ValueError as e:
            raise ValidationException(str(e), field="code") from e
        tenant = Tenant(code=valid_code.value, name=name, status=status.value)
        try:
            created = await self.create(tenant)
        except IntegrityError as e:
            raise ValidationException(f"Tenant code already exists: {code}", field="code") from e
        return _tenant_to_result(created)

    async def _on_after_create(self, obj: Tenant) -> None:
        await self._invalidate(obj)

    async def _on_after_update(self, obj: Tenant) -> None:
        await self._invalidate(obj)

    async def _on_before_delete(self, obj: Tenant) -> None:
        await self._invalidate(obj)

    async def _invalidate(self, obj: Tenant) -> None:
        if self._cache_on():
            await self.cache.delete(tenant_key(obj.id))
            await self.cache.delete(tenant_code_key(obj.code))
