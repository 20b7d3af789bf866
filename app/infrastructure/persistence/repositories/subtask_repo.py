"""Subtask repository: ordered checklist items of a task."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.subtask import SubtaskResult
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.persistence.models.subtask import Subtask
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now


def _to_result(s: Subtask) -> SubtaskResult:
    return SubtaskResult(
        id=s.id,
        task_id=s.task_id,
        title=s.title,
        is_completed=s.is_completed,
        completed_at=ensure_utc(s.completed_at),
        completed_by=s.completed_by,
        position=s.position,
        created_by=s.created_by,
        created_at=ensure_utc(s.created_at),
    )


class SubtaskRepository(BaseRepository[Subtask]):
    resource_name = "subtask"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Subtask)

    async def _get_in_task(self, tenant_id: str, task_id: str, subtask_id: str) -> Subtask:
        result = await self.db.execute(
            select(Subtask).where(
                Subtask.id == subtask_id,
                Subtask.task_id == task_id,
                Subtask.tenant_id == tenant_id,
            )
        )
        subtask = result.scalar_one_or_none()
        if subtask is None:
            raise ResourceNotFoundException("subtask", subtask_id)
        return subtask

    async def list_for_task(self, tenant_id: str, task_id: str) -> list[SubtaskResult]:
        result = await self.db.execute(
            select(Subtask)
            .where(Subtask.tenant_id == tenant_id, Subtask.task_id == task_id)
            .order_by(Subtask.position.asc(), Subtask.created_at.asc())
        )
        return [_to_result(s) for s in result.scalars().all()]

    async def add(
        self, tenant_id: str, task_id: str, title: str, created_by: str | None
    ) -> SubtaskResult:
        """Append a subtask at the end (position = max + 1, first is 0)."""
        max_position = await self.db.scalar(
            select(func.max(Subtask.position)).where(
                Subtask.tenant_id == tenant_id, Subtask.task_id == task_id
            )
        )
        subtask = Subtask(
            tenant_id=tenant_id,
            task_id=task_id,
            title=title,
            position=0 if max_position is None else max_position + 1,
            created_by=created_by,
        )
        return _to_result(await self.create(subtask))

    async def update(
        self,
        tenant_id: str,
        task_id: str,
        subtask_id: str,
        *,
        title: str | None = None,
        is_completed: bool | None = None,
        acting_user_id: str | None = None,
        now: datetime | None = None,
    ) -> tuple[SubtaskResult, SubtaskResult]:
        """Update title and/or completion; returns (before, after).

        Completion sets completed_at and completed_by together; un-completing
        clears both.
        """
        subtask = await self._get_in_task(tenant_id, task_id, subtask_id)
        before = _to_result(subtask)
        if title is not None:
            subtask.title = title
        if is_completed is not None and is_completed != subtask.is_completed:
            subtask.is_completed = is_completed
            subtask.completed_at = (now or utc_now()) if is_completed else None
            subtask.completed_by = acting_user_id if is_completed else None
        return before, _to_result(await self.save(subtask))

    async def reorder(
        self, tenant_id: str, task_id: str, ordered_ids: list[str]
    ) -> list[SubtaskResult]:
        """Set positions 0..n-1 in the given order. The ids must be exactly the task's subtasks."""
        result = await self.db.execute(
            select(Subtask).where(Subtask.tenant_id == tenant_id, Subtask.task_id == task_id)
        )
        by_id = {s.id: s for s in result.scalars().all()}
        if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(by_id):
            raise ValidationException(
                "Reorder must list every subtask of the task exactly once",
                field="subtask_ids",
            )
        for position, subtask_id in enumerate(ordered_ids):
            by_id[subtask_id].position = position
        await self.db.flush()
        return await self.list_for_task(tenant_id, task_id)

    async def remove(self, tenant_id: str, task_id: str, subtask_id: str) -> SubtaskResult:
        """Delete immediately; returns the deleted row."""
        subtask = await self._get_in_task(tenant_id, task_id, subtask_id)
        removed = _to_result(subtask)
        await self.delete(subtask)
        return removed
