"""DTOs for tasks (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.entities.task import TaskEntity
from app.domain.enums import TaskPriority, TaskSourceType, TaskStatus, TaskView
from app.domain.value_objects.payloads import SourceMetadata
from app.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class TaskResult:
    """Task read-model. source_metadata is the typed variant for source_type."""

    id: str
    tenant_id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    source_type: TaskSourceType
    source_metadata: SourceMetadata | None
    source_email_id: str | None
    action_type_id: str | None
    client_id: str | None
    assigned_to: str | None
    assigned_by: str | None
    assigned_at: datetime | None
    claimed_by: str | None
    claimed_at: datetime | None
    due_date: datetime | None
    completed_at: datetime | None
    created_by: str | None
    routed_from_task_id: str | None
    handoff_to: str | None
    handoff_from: str | None
    handoff_notes: str | None
    handoff_at: datetime | None
    created_at: datetime
    updated_at: datetime

    def to_entity(self) -> TaskEntity:
        return TaskEntity(
            id=self.id,
            tenant_id=self.tenant_id,
            title=self.title,
            status=self.status,
            assigned_to=self.assigned_to,
            claimed_by=self.claimed_by,
            due_date=self.due_date,
            completed_at=self.completed_at,
        )

    @property
    def is_unassigned(self) -> bool:
        return self.assigned_to is None and self.claimed_by is None

    def is_held_by(self, user_id: str) -> bool:
        return user_id in (self.assigned_to, self.claimed_by)

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Due date in the past and not completed. Derived, never stored."""
        return self.to_entity().is_overdue(now or utc_now())


@dataclass(frozen=True)
class TaskCreate:
    """Input for creating a task."""

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.OPEN
    priority: TaskPriority = TaskPriority.MEDIUM
    source_type: TaskSourceType = TaskSourceType.MANUAL
    source_metadata: dict[str, Any] | None = None
    source_email_id: str | None = None
    action_type_id: str | None = None
    client_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    routed_from_task_id: str | None = None


@dataclass(frozen=True)
class ActionItemCreate:
    """An inbound call, email or document action item to turn into a task."""

    title: str
    action_item_type: str
    source_type: TaskSourceType
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    source_metadata: dict[str, Any] | None = None
    source_email_id: str | None = None
    client_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class TaskListFilters:
    """Filters for listing tasks (all optional; combined with AND)."""

    view: TaskView | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: str | None = None
    client_id: str | None = None
    action_type_id: str | None = None
    source_type: TaskSourceType | None = None
    search: str | None = None
    # Restrict to tasks the user created, holds, or claimed (staff without view_all)
    visible_to_user_id: str | None = None
    # Only tasks whose source_type is one of these
    source_types: tuple[TaskSourceType, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TaskPage:
    items: list[TaskResult]
    total: int
    skip: int
    limit: int


@dataclass(frozen=True)
class TaskPoolStats:
    """Counts for the task pool dashboard."""

    open: int
    in_progress: int
    completed: int
    pool_available: int
    my_claimed: int
    overdue: int
    completed_today: int
    urgent: int
    high: int
    by_action_type: dict[str, int]

    @property
    def total(self) -> int:
        return self.open + self.in_progress + self.completed


@dataclass(frozen=True)
class UserTaskCounts:
    """Raw per-user numbers before privacy is applied."""

    tasks_completed: int
    tasks_in_progress: int
    avg_completion_minutes: float | None


@dataclass(frozen=True)
class TaskHandoffResult:
    id: str
    task_id: str
    from_user_id: str | None
    to_user_id: str
    notes: str | None
    created_at: datetime


@dataclass(frozen=True)
class InboxResult:
    """Caller's open work plus handoffs waiting for acceptance."""

    tasks: list[TaskResult]
    pending_handoffs: list[TaskResult]
