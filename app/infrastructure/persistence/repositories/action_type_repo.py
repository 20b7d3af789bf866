"""Task action type repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.action_type import (
    DEFAULT_ACTION_TYPES,
    ActionTypeResult,
    ActionTypeSeed,
)
from app.domain.value_objects.core import HexColor
from app.infrastructure.persistence.models.action_type import TaskActionType
from app.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(row: TaskActionType) -> ActionTypeResult:
    return ActionTypeResult(
        id=row.id,
        code=row.code,
        label=row.label,
        color=row.color,
        icon=row.icon,
        sort_order=row.sort_order,
        is_active=row.is_active,
    )


class ActionTypeRepository(BaseRepository[TaskActionType]):
    resource_name = "action_type"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskActionType)

    async def list_active(self, tenant_id: str) -> list[ActionTypeResult]:
        result = await self.db.execute(
            select(TaskActionType)
            .where(TaskActionType.tenant_id == tenant_id, TaskActionType.is_active.is_(True))
            .order_by(TaskActionType.sort_order.asc(), TaskActionType.code.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def get_result(self, tenant_id: str, action_type_id: str) -> ActionTypeResult | None:
        row = await self.get_for_tenant(tenant_id, action_type_id)
        return _to_result(row) if row else None

    async def get_by_code(self, tenant_id: str, code: str) -> ActionTypeResult | None:
        result = await self.db.execute(
            select(TaskActionType).where(
                TaskActionType.tenant_id == tenant_id, TaskActionType.code == code
            )
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def ensure_defaults(
        self, tenant_id: str, seeds: tuple[ActionTypeSeed, ...] = DEFAULT_ACTION_TYPES
    ) -> list[ActionTypeResult]:
        """Create any missing default action types for tenant_id (idempotent)."""
        result = await self.db.execute(
            select(TaskActionType.code).where(TaskActionType.tenant_id == tenant_id)
        )
        existing = set(result.scalars().all())
        for seed in seeds:
            if seed.code in existing:
                continue
            self.db.add(
                TaskActionType(
                    tenant_id=tenant_id,
                    code=seed.code,
                    label=seed.label,
                    color=HexColor(seed.color).value,
                    icon=seed.icon,
                    sort_order=seed.sort_order,
                )
            )
        await self.db.flush()
        return await self.list_active(tenant_id)
