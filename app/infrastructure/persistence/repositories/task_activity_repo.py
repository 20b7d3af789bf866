"""Task activity repository. Append-only; no update or delete."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.task_activity import TaskActivityCreate, TaskActivityResult
from app.domain.enums import TaskActivityAction
from app.domain.value_objects.payloads import dump_payload, parse_activity_details
from app.infrastructure.persistence.models.task_activity import TaskActivity
from app.shared.utils.datetime import ensure_utc


def _to_result(row: TaskActivity) -> TaskActivityResult:
    return TaskActivityResult(
        id=row.id,
        tenant_id=row.tenant_id,
        task_id=row.task_id,
        user_id=row.user_id,
        action=TaskActivityAction(row.action),
        description=row.description,
        old_value=row.old_value,
        new_value=row.new_value,
        details=parse_activity_details(row.details) if row.details is not None else None,
        created_at=ensure_utc(row.created_at),
    )


class TaskActivityRepository:
    """Append-only task activity log."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(self, tenant_id: str, entry: TaskActivityCreate) -> TaskActivityResult:
        row = TaskActivity(
            tenant_id=tenant_id,
            task_id=entry.task_id,
            user_id=entry.user_id,
            action=entry.action.value,
            description=entry.description,
            old_value=entry.old_value,
            new_value=entry.new_value,
            details=dump_payload(entry.details) if entry.details is not None else None,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _to_result(row)

    async def list_for_task(
        self, tenant_id: str, task_id: str, *, skip: int = 0, limit: int = 50
    ) -> list[TaskActivityResult]:
        """Newest first."""
        result = await self.db.execute(
            select(TaskActivity)
            .where(TaskActivity.tenant_id == tenant_id, TaskActivity.task_id == task_id)
            .order_by(TaskActivity.created_at.desc(), TaskActivity.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def count_for_task(self, tenant_id: str, task_id: str) -> int:
        total = await self.db.scalar(
            select(func.count())
            .select_from(TaskActivity)
            .where(TaskActivity.tenant_id == tenant_id, TaskActivity.task_id == task_id)
        )
        return int(total or 0)
