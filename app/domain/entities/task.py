"""Task domain entity.

Represents the business concept of a task in the pool, independent of
persistence: pool membership, ownership, derived overdue state, and the
status machine (completed_at bookkeeping).
"""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import TaskActivityAction, TaskStatus
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status transition: what to persist and what to log."""

    old_status: TaskStatus
    new_status: TaskStatus
    completed_at: datetime | None
    action: TaskActivityAction

    @property
    def is_noop(self) -> bool:
        return self.old_status == self.new_status


@dataclass
class TaskEntity:
    """Domain entity for a task (SRP: business rules separate from persistence).

    A task with neither assigned_to nor claimed_by is in the org-wide pool.
    completed_at is set iff status is COMPLETED. Overdue is derived, never
    stored. Validation runs on construction.
    """

    id: str
    tenant_id: str
    title: str
    status: TaskStatus
    assigned_to: str | None = None
    claimed_by: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate task business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Task ID is required", field="id")
        if not self.tenant_id:
            raise ValidationException("Task must belong to a tenant", field="tenant_id")
        if not self.title or not self.title.strip():
            raise ValidationException("Task title is required", field="title")

    @property
    def is_unassigned(self) -> bool:
        """Return True when the task belongs to the unassigned pool."""
        return self.assigned_to is None and self.claimed_by is None

    def is_held_by(self, user_id: str) -> bool:
        """Return True if user_id is the assignee or the claimant."""
        return user_id in (self.assigned_to, self.claimed_by)

    def is_overdue(self, now: datetime) -> bool:
        """Return True if due date has passed and the task is not completed.

        Args:
            now: Current UTC time (timezone-aware).
        """
        if self.due_date is None or self.status == TaskStatus.COMPLETED:
            return False
        return self.due_date < now

    def plan_status_change(self, new_status: TaskStatus, now: datetime) -> StatusChange:
        """Return the transition to new_status without mutating the entity.

        Any status may move to any other (including cancelled -> completed),
        except that a completed task must be reopened before it is cancelled.
        Entering COMPLETED stamps completed_at; leaving it clears completed_at.
        Re-completing an already completed task keeps the original timestamp.

        Raises:
            ValidationException: When cancelling a completed task.
        """
        if new_status == TaskStatus.CANCELLED and self.status == TaskStatus.COMPLETED:
            raise ValidationException(
                "Completed tasks cannot be cancelled; reopen first", field="status"
            )
        if new_status == TaskStatus.COMPLETED:
            completed_at = self.completed_at if self.status == TaskStatus.COMPLETED else now
            completed_at = completed_at or now
        else:
            completed_at = None
        return StatusChange(
            old_status=self.status,
            new_status=new_status,
            completed_at=completed_at,
            action=_activity_action_for(self.status, new_status),
        )

    def apply(self, change: StatusChange) -> None:
        """Apply a planned status change to this entity."""
        self.status = change.new_status
        self.completed_at = change.completed_at


def _activity_action_for(old: TaskStatus, new: TaskStatus) -> TaskActivityAction:
    if new == TaskStatus.COMPLETED:
        return TaskActivityAction.COMPLETED
    if new == TaskStatus.CANCELLED:
        return TaskActivityAction.CANCELLED
    if old == TaskStatus.COMPLETED:
        return TaskActivityAction.REOPENED
    return TaskActivityAction.STATUS_CHANGED
