"""Task repository: pool queries, filtered listing and ownership transitions.

All methods are tenant-scoped. Ownership changes that can race (claim,
handoff accept) are single conditional UPDATE statements; the caller's
transaction (get_db_transactional) makes the accompanying activity row
commit or roll back with the change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.task import (
    TaskCreate,
    TaskListFilters,
    TaskPage,
    TaskPoolStats,
    TaskResult,
    UserTaskCounts,
)
from app.domain.entities.task import StatusChange
from app.domain.enums import (
    TaskPriority,
    TaskSourceType,
    TaskStatus,
    TaskView,
)
from app.domain.exceptions import ResourceNotFoundException, TaskConflictException
from app.domain.value_objects.payloads import dump_payload, parse_source_metadata
from app.infrastructure.persistence.models.action_type import TaskActionType
from app.infrastructure.persistence.models.task import Task
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, minutes_between, start_of_utc_day, utc_now
from app.shared.utils.sanitization import escape_like

_CLOSED_STATUSES = (TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value)

# Fields a PATCH may set directly (status and ownership go through dedicated methods)
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "priority",
        "due_date",
        "action_type_id",
        "client_id",
    }
)


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO (typed source metadata, UTC datetimes)."""
    metadata = (
        parse_source_metadata(t.source_type, t.source_metadata)
        if t.source_metadata is not None
        else None
    )
    return TaskResult(
        id=t.id,
        tenant_id=t.tenant_id,
        title=t.title,
        description=t.description,
        status=TaskStatus(t.status),
        priority=TaskPriority(t.priority),
        source_type=TaskSourceType(t.source_type),
        source_metadata=metadata,
        source_email_id=t.source_email_id,
        action_type_id=t.action_type_id,
        client_id=t.client_id,
        assigned_to=t.assigned_to,
        assigned_by=t.assigned_by,
        assigned_at=ensure_utc(t.assigned_at),
        claimed_by=t.claimed_by,
        claimed_at=ensure_utc(t.claimed_at),
        due_date=ensure_utc(t.due_date),
        completed_at=ensure_utc(t.completed_at),
        created_by=t.created_by,
        routed_from_task_id=t.routed_from_task_id,
        handoff_to=t.handoff_to,
        handoff_from=t.handoff_from,
        handoff_notes=t.handoff_notes,
        handoff_at=ensure_utc(t.handoff_at),
        created_at=ensure_utc(t.created_at),
        updated_at=ensure_utc(t.updated_at),
    )


def _is_unassigned() -> ColumnElement[bool]:
    return and_(Task.assigned_to.is_(None), Task.claimed_by.is_(None))


def _held_by(user_id: str) -> ColumnElement[bool]:
    return or_(Task.assigned_to == user_id, Task.claimed_by == user_id)


def _is_overdue(now: datetime) -> ColumnElement[bool]:
    """Same rule as TaskEntity.is_overdue: past due and not completed."""
    return and_(
        Task.due_date.is_not(None),
        Task.due_date < now,
        Task.status != TaskStatus.COMPLETED.value,
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Returns TaskResult DTOs; raises domain exceptions."""

    resource_name = "task"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    # ---- reads ----

    async def get(self, tenant_id: str, task_id: str) -> TaskResult | None:
        task = await self.get_for_tenant(tenant_id, task_id)
        return _to_result(task) if task else None

    async def get_or_raise(self, tenant_id: str, task_id: str) -> TaskResult:
        return _to_result(await self.get_for_tenant_or_raise(tenant_id, task_id))

    async def list_unassigned(
        self,
        tenant_id: str,
        *,
        include_closed: bool = True,
        action_type_id: str | None = None,
    ) -> list[TaskResult]:
        """Tasks with neither assignee nor claimant, oldest first.

        include_closed=False drops completed and cancelled tasks (pool view).
        """
        conditions: list[ColumnElement[bool]] = [Task.tenant_id == tenant_id, _is_unassigned()]
        if not include_closed:
            conditions.append(Task.status.not_in(_CLOSED_STATUSES))
        if action_type_id is not None:
            conditions.append(Task.action_type_id == action_type_id)
        result = await self.db.execute(
            select(Task).where(*conditions).order_by(Task.created_at.asc(), Task.id.asc())
        )
        return [_to_result(t) for t in result.scalars().all()]

    async def list_by_assignee(
        self, tenant_id: str, user_id: str, *, open_only: bool = False
    ) -> list[TaskResult]:
        """Tasks assigned to or claimed by user_id, newest first."""
        conditions: list[ColumnElement[bool]] = [Task.tenant_id == tenant_id, _held_by(user_id)]
        if open_only:
            conditions.append(Task.status.not_in(_CLOSED_STATUSES))
        result = await self.db.execute(
            select(Task).where(*conditions).order_by(Task.created_at.desc(), Task.id.desc())
        )
        return [_to_result(t) for t in result.scalars().all()]

    async def list_pending_handoffs(self, tenant_id: str, user_id: str) -> list[TaskResult]:
        """Tasks handed off to user_id and not yet accepted."""
        result = await self.db.execute(
            select(Task)
            .where(
                Task.tenant_id == tenant_id,
                Task.handoff_to == user_id,
                Task.status.not_in(_CLOSED_STATUSES),
            )
            .order_by(Task.handoff_at.desc(), Task.id.desc())
        )
        return [_to_result(t) for t in result.scalars().all()]

    def _filter_conditions(
        self,
        tenant_id: str,
        filters: TaskListFilters,
        user_id: str | None,
        now: datetime,
    ) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = [Task.tenant_id == tenant_id]
        view = filters.view
        if view == TaskView.POOL:
            conditions.append(_is_unassigned())
            conditions.append(Task.status.in_([s.value for s in TaskStatus.not_started()]))
        elif view == TaskView.MY_ASSIGNED and user_id:
            conditions.append(Task.assigned_to == user_id)
            conditions.append(Task.status != TaskStatus.COMPLETED.value)
        elif view == TaskView.MY_CLAIMED and user_id:
            conditions.append(Task.claimed_by == user_id)
            conditions.append(Task.status != TaskStatus.COMPLETED.value)
        elif view == TaskView.OVERDUE:
            conditions.append(_is_overdue(now))

        if filters.status is not None:
            conditions.append(Task.status == filters.status.value)
        if filters.priority is not None:
            conditions.append(Task.priority == filters.priority.value)
        if filters.assigned_to is not None:
            conditions.append(Task.assigned_to == filters.assigned_to)
        if filters.client_id is not None:
            conditions.append(Task.client_id == filters.client_id)
        if filters.action_type_id is not None:
            conditions.append(Task.action_type_id == filters.action_type_id)
        if filters.source_type is not None:
            conditions.append(Task.source_type == filters.source_type.value)
        if filters.source_types:
            conditions.append(Task.source_type.in_([s.value for s in filters.source_types]))
        if filters.search:
            pattern = f"%{escape_like(filters.search.strip())}%"
            conditions.append(
                or_(
                    Task.title.ilike(pattern, escape="\\"),
                    Task.description.ilike(pattern, escape="\\"),
                )
            )
        if filters.visible_to_user_id is not None:
            uid = filters.visible_to_user_id
            conditions.append(or_(_held_by(uid), Task.created_by == uid))
        return conditions

    async def list(
        self,
        tenant_id: str,
        filters: TaskListFilters,
        *,
        user_id: str | None = None,
        skip: int = 0,
        limit: int = 50,
        now: datetime | None = None,
    ) -> TaskPage:
        """Filtered page of tasks, newest first. user_id resolves the my_* views."""
        conditions = self._filter_conditions(tenant_id, filters, user_id, now or utc_now())
        total = await self.db.scalar(select(func.count()).select_from(Task).where(*conditions))
        result = await self.db.execute(
            select(Task)
            .where(*conditions)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return TaskPage(
            items=[_to_result(t) for t in result.scalars().all()],
            total=int(total or 0),
            skip=skip,
            limit=limit,
        )

    # ---- writes ----

    async def create_task(
        self, tenant_id: str, data: TaskCreate, *, created_by: str | None
    ) -> TaskResult:
        """Insert a task. Source metadata is validated against its source_type variant."""
        now = utc_now()
        metadata: dict[str, Any] | None = None
        if data.source_metadata is not None or data.source_type != TaskSourceType.MANUAL:
            metadata = dump_payload(
                parse_source_metadata(data.source_type.value, data.source_metadata)
            )
        task = Task(
            tenant_id=tenant_id,
            title=data.title,
            description=data.description,
            status=data.status.value,
            priority=data.priority.value,
            source_type=data.source_type.value,
            source_metadata=metadata,
            source_email_id=data.source_email_id,
            action_type_id=data.action_type_id,
            client_id=data.client_id,
            due_date=data.due_date,
            created_by=created_by,
            routed_from_task_id=data.routed_from_task_id,
            completed_at=now if data.status == TaskStatus.COMPLETED else None,
        )
        if data.assigned_to is not None:
            task.assigned_to = data.assigned_to
            task.assigned_by = created_by
            task.assigned_at = now
        return _to_result(await self.create(task))

    async def update_fields(
        self, tenant_id: str, task_id: str, changes: dict[str, Any]
    ) -> TaskResult:
        """Set plain fields (see UPDATABLE_FIELDS); unknown keys raise ValueError."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        task = await self.get_for_tenant_or_raise(tenant_id, task_id)
        for key, value in changes.items():
            if isinstance(value, (TaskPriority, TaskStatus)):
                value = value.value
            setattr(task, key, value)
        return _to_result(await self.save(task))

    async def update_status(
        self,
        tenant_id: str,
        task_id: str,
        new_status: TaskStatus,
        *,
        now: datetime | None = None,
    ) -> tuple[StatusChange, TaskResult]:
        """Move task to new_status, maintaining completed_at.

        Entering completed stamps completed_at; leaving it clears it.

        Raises:
            ResourceNotFoundException: If the task does not exist in tenant.
            ValidationException: If the transition is not allowed.
        """
        task = await self.get_for_tenant_or_raise(tenant_id, task_id)
        entity = _to_result(task).to_entity()
        change = entity.plan_status_change(new_status, now or utc_now())
        if not change.is_noop:
            entity.apply(change)
            task.status = entity.status.value
            task.completed_at = entity.completed_at
            task = await self.save(task)
        return change, _to_result(task)

    async def claim(
        self,
        tenant_id: str,
        task_id: str,
        user_id: str,
        *,
        now: datetime | None = None,
    ) -> TaskResult:
        """Atomically take an unassigned task for user_id.

        One conditional UPDATE guarded by assigned_to IS NULL AND claimed_by
        IS NULL: of two concurrent claimants exactly one matches a row.
        Open and pending tasks move to in_progress.

        Raises:
            ResourceNotFoundException: If the task does not exist in tenant.
            TaskConflictException: If the task is already assigned or claimed.
        """
        now = now or utc_now()
        await self.db.flush()
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.tenant_id == tenant_id, _is_unassigned())
            .values(
                assigned_to=user_id,
                claimed_by=user_id,
                claimed_at=now,
                status=case(
                    (
                        Task.status.in_([s.value for s in TaskStatus.not_started()]),
                        TaskStatus.IN_PROGRESS.value,
                    ),
                    else_=Task.status,
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            await self._raise_missing_or_conflict(tenant_id, task_id, "already_claimed")
        return await self._reload(tenant_id, task_id)

    async def assign(
        self,
        tenant_id: str,
        task_id: str,
        user_id: str,
        acting_user_id: str,
        *,
        now: datetime | None = None,
    ) -> TaskResult:
        """Assign to user_id (replaces any assignee; clears a different claimant)."""
        now = now or utc_now()
        task = await self.get_for_tenant_or_raise(tenant_id, task_id)
        task.assigned_to = user_id
        task.assigned_by = acting_user_id
        task.assigned_at = now
        if task.claimed_by is not None and task.claimed_by != user_id:
            task.claimed_by = None
            task.claimed_at = None
        return _to_result(await self.save(task))

    async def release(
        self, tenant_id: str, task_id: str, *, now: datetime | None = None
    ) -> TaskResult:
        """Return the task to the pool: clear ownership and any pending handoff.

        An in_progress task goes back to open.
        """
        task = await self.get_for_tenant_or_raise(tenant_id, task_id)
        task.assigned_to = None
        task.assigned_by = None
        task.assigned_at = None
        task.claimed_by = None
        task.claimed_at = None
        task.handoff_to = None
        if task.status == TaskStatus.IN_PROGRESS.value:
            task.status = TaskStatus.OPEN.value
        return _to_result(await self.save(task))

    async def start_handoff(
        self,
        tenant_id: str,
        task_id: str,
        from_user_id: str,
        to_user_id: str,
        notes: str | None,
        *,
        now: datetime | None = None,
    ) -> TaskResult:
        """Record a pending handoff; ownership moves only on accept."""
        task = await self.get_for_tenant_or_raise(tenant_id, task_id)
        task.handoff_from = from_user_id
        task.handoff_to = to_user_id
        task.handoff_notes = notes
        task.handoff_at = now or utc_now()
        return _to_result(await self.save(task))

    async def accept_handoff(
        self,
        tenant_id: str,
        task_id: str,
        user_id: str,
        *,
        now: datetime | None = None,
    ) -> TaskResult:
        """Atomically move ownership to user_id if a handoff to them is pending.

        Raises:
            ResourceNotFoundException: If the task does not exist in tenant.
            TaskConflictException: If no handoff to user_id is pending.
        """
        now = now or utc_now()
        await self.db.flush()
        stmt = (
            update(Task)
            .where(
                Task.id == task_id,
                Task.tenant_id == tenant_id,
                Task.handoff_to == user_id,
            )
            .values(
                assigned_to=user_id,
                assigned_by=Task.handoff_from,
                assigned_at=now,
                claimed_by=None,
                claimed_at=None,
                handoff_to=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            await self._raise_missing_or_conflict(tenant_id, task_id, "no_pending_handoff")
        return await self._reload(tenant_id, task_id)

    async def delete_task(self, tenant_id: str, task_id: str) -> None:
        """Hard delete (subtasks, activity and handoffs cascade)."""
        await self.get_for_tenant_or_raise(tenant_id, task_id)
        await self.db.execute(
            delete(Task)
            .where(Task.id == task_id, Task.tenant_id == tenant_id)
            .execution_options(synchronize_session=False)
        )

    async def _raise_missing_or_conflict(
        self, tenant_id: str, task_id: str, reason: str
    ) -> None:
        exists = await self.db.scalar(
            select(Task.id).where(Task.id == task_id, Task.tenant_id == tenant_id)
        )
        if exists is None:
            raise ResourceNotFoundException("task", task_id)
        raise TaskConflictException(task_id, reason)

    async def _reload(self, tenant_id: str, task_id: str) -> TaskResult:
        result = await self.db.execute(
            select(Task)
            .where(Task.id == task_id, Task.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        return _to_result(result.scalar_one())

    # ---- aggregates ----

    async def _count(self, *conditions: ColumnElement[bool]) -> int:
        total = await self.db.scalar(select(func.count()).select_from(Task).where(*conditions))
        return int(total or 0)

    async def pool_stats(
        self, tenant_id: str, user_id: str, *, now: datetime | None = None
    ) -> TaskPoolStats:
        """Dashboard counts for the task pool."""
        now = now or utc_now()
        in_tenant = Task.tenant_id == tenant_id
        not_completed = Task.status != TaskStatus.COMPLETED.value

        status_rows = await self.db.execute(
            select(Task.status, func.count()).where(in_tenant).group_by(Task.status)
        )
        by_status = {status: int(count) for status, count in status_rows}

        priority_rows = await self.db.execute(
            select(Task.priority, func.count())
            .where(in_tenant, not_completed)
            .group_by(Task.priority)
        )
        by_priority = {priority: int(count) for priority, count in priority_rows}

        pool_condition = and_(in_tenant, _is_unassigned(), Task.status == TaskStatus.OPEN.value)
        action_rows = await self.db.execute(
            select(TaskActionType.code, func.count(Task.id))
            .select_from(TaskActionType)
            .outerjoin(Task, and_(Task.action_type_id == TaskActionType.id, pool_condition))
            .where(TaskActionType.tenant_id == tenant_id, TaskActionType.is_active.is_(True))
            .group_by(TaskActionType.code, TaskActionType.sort_order)
            .order_by(TaskActionType.sort_order)
        )

        return TaskPoolStats(
            open=by_status.get(TaskStatus.OPEN.value, 0),
            in_progress=by_status.get(TaskStatus.IN_PROGRESS.value, 0),
            completed=by_status.get(TaskStatus.COMPLETED.value, 0),
            pool_available=await self._count(pool_condition),
            my_claimed=await self._count(in_tenant, Task.claimed_by == user_id, not_completed),
            overdue=await self._count(in_tenant, _is_overdue(now)),
            completed_today=await self._count(
                in_tenant,
                Task.status == TaskStatus.COMPLETED.value,
                Task.completed_at >= start_of_utc_day(now),
            ),
            urgent=by_priority.get(TaskPriority.URGENT.value, 0),
            high=by_priority.get(TaskPriority.HIGH.value, 0),
            by_action_type={code: int(count) for code, count in action_rows},
        )

    async def user_counts(self, tenant_id: str, user_id: str) -> UserTaskCounts:
        """Completed and in-progress counts plus mean minutes from pickup to completion."""
        held = and_(Task.tenant_id == tenant_id, _held_by(user_id))
        in_progress = await self._count(held, Task.status == TaskStatus.IN_PROGRESS.value)
        rows = (
            await self.db.execute(
                select(
                    Task.completed_at, Task.claimed_at, Task.assigned_at, Task.created_at
                ).where(held, Task.status == TaskStatus.COMPLETED.value)
            )
        ).all()
        durations = []
        for completed_at, claimed_at, assigned_at, created_at in rows:
            started = claimed_at or assigned_at or created_at
            if completed_at is None or started is None:
                continue
            minutes = minutes_between(started, completed_at)
            if minutes >= 0:
                durations.append(minutes)
        return UserTaskCounts(
            tasks_completed=len(rows),
            tasks_in_progress=in_progress,
            avg_completion_minutes=sum(durations) / len(durations) if durations else None,
        )
