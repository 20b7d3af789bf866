"""Task handoff history repository (append-only)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.task import TaskHandoffResult
from app.infrastructure.persistence.models.task_handoff import TaskHandoff
from app.shared.utils.datetime import ensure_utc


def _to_result(row: TaskHandoff) -> TaskHandoffResult:
    return TaskHandoffResult(
        id=row.id,
        task_id=row.task_id,
        from_user_id=row.from_user_id,
        to_user_id=row.to_user_id,
        notes=row.notes,
        created_at=ensure_utc(row.created_at),
    )


class TaskHandoffRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record(
        self,
        tenant_id: str,
        task_id: str,
        from_user_id: str | None,
        to_user_id: str,
        notes: str | None,
    ) -> TaskHandoffResult:
        row = TaskHandoff(
            tenant_id=tenant_id,
            task_id=task_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            notes=notes,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _to_result(row)

    async def history(self, tenant_id: str, task_id: str) -> list[TaskHandoffResult]:
        """Oldest first."""
        result = await self.db.execute(
            select(TaskHandoff)
            .where(TaskHandoff.tenant_id == tenant_id, TaskHandoff.task_id == task_id)
            .order_by(TaskHandoff.created_at.asc(), TaskHandoff.id.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]
