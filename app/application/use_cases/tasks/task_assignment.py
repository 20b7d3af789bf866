"""Task assignment: claim, release, assign, status changes, completion and handoff.

Each transition is one repository mutation plus one (or more) activity
entries, all on the request's transactional session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.dtos.task import TaskCreate, TaskHandoffResult, TaskResult
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import (
    IActionTypeRepository,
    ITaskHandoffRepository,
    ITaskRepository,
    IUserRepository,
)
from app.application.services.privacy_filter import PrivacyFilter
from app.application.use_cases.tasks.task_activity_operations import TaskActivityService
from app.domain.enums import TaskActivityAction, TaskSourceType, TaskStatus
from app.domain.exceptions import (
    AuthorizationException,
    TaskConflictException,
    ValidationException,
)
from app.domain.value_objects.payloads import (
    AssignmentDetails,
    HandoffDetails,
    RoutingDetails,
)
from app.shared.telemetry import get_tracer
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class CompletionResult:
    completed_task: TaskResult
    routed_task: TaskResult | None = None


class TaskAssignmentService:
    """Ownership and status transitions for pool tasks."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        activity: TaskActivityService,
        user_repo: IUserRepository,
        handoff_repo: ITaskHandoffRepository | None = None,
        action_type_repo: IActionTypeRepository | None = None,
        privacy_filter: PrivacyFilter | None = None,
    ) -> None:
        self.task_repo = task_repo
        self.activity = activity
        self.user_repo = user_repo
        self.handoff_repo = handoff_repo
        self.action_type_repo = action_type_repo
        self.privacy_filter = privacy_filter

    async def _require_member(self, tenant_id: str, user_id: str, field: str) -> None:
        if not await self.user_repo.existing_ids(tenant_id, {user_id}):
            raise ValidationException(f"Unknown or inactive user: {user_id}", field=field)

    async def _visible_task(self, tenant_id: str, task_id: str, viewer: Viewer) -> TaskResult:
        task = await self.task_repo.get_or_raise(tenant_id, task_id)
        if self.privacy_filter is None:
            return task
        return await self.privacy_filter.ensure_task_visible(task, viewer, tenant_id)

    # ---- claim / release ----

    async def claim(self, tenant_id: str, task_id: str, actor: Viewer) -> TaskResult:
        """Take an unassigned task for the actor; a lost race raises TaskConflictException."""
        with tracer.start_as_current_span("taskpool.claim") as span:
            span.set_attribute("task.id", task_id)
            try:
                task = await self.task_repo.claim(tenant_id, task_id, actor.user_id)
            except TaskConflictException:
                logger.warning(
                    "Claim conflict: task %s already taken (user=%s)", task_id, actor.user_id
                )
                raise
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.CLAIMED,
            new_value=actor.user_id,
            details=AssignmentDetails(assigned_to=actor.user_id),
        )
        logger.info("Task %s claimed by %s", task_id, actor.user_id)
        return task

    async def release(
        self,
        tenant_id: str,
        task_id: str,
        actor: Viewer,
        *,
        can_manage: bool = False,
    ) -> TaskResult:
        """Return a held task to the pool.

        Allowed for the current holder, or any user that can manage the pool
        (recorded as unassigned rather than released).
        """
        task = await self._visible_task(tenant_id, task_id, actor)
        if task.is_unassigned:
            raise TaskConflictException(task_id, "not_held")
        holder = task.assigned_to or task.claimed_by
        is_holder = task.is_held_by(actor.user_id)
        if not is_holder and not can_manage:
            raise AuthorizationException(resource="taskpool", action="release")
        released = await self.task_repo.release(tenant_id, task_id)
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.RELEASED if is_holder else TaskActivityAction.UNASSIGNED,
            old_value=holder,
            details=AssignmentDetails(previous_assignee=holder),
        )
        logger.info("Task %s returned to pool by %s (was %s)", task_id, actor.user_id, holder)
        return released

    # ---- assign / unassign ----

    async def assign(
        self, tenant_id: str, task_id: str, user_id: str, actor: Viewer
    ) -> TaskResult:
        """Assign task to user_id on behalf of actor (replaces the current holder)."""
        await self._require_member(tenant_id, user_id, "assigned_to")
        before = await self._visible_task(tenant_id, task_id, actor)
        if before.assigned_to == user_id:
            return before
        task = await self.task_repo.assign(tenant_id, task_id, user_id, actor.user_id)
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.ASSIGNED,
            old_value=before.assigned_to,
            new_value=user_id,
            details=AssignmentDetails(
                assigned_to=user_id,
                previous_assignee=before.assigned_to,
                assigned_by=actor.user_id,
            ),
        )
        logger.info("Task %s assigned to %s by %s", task_id, user_id, actor.user_id)
        return task

    async def unassign(self, tenant_id: str, task_id: str, actor: Viewer) -> TaskResult:
        """Manager-initiated return to the pool."""
        return await self.release(tenant_id, task_id, actor, can_manage=True)

    # ---- status ----

    async def change_status(
        self,
        tenant_id: str,
        task_id: str,
        new_status: TaskStatus,
        actor: Viewer,
        *,
        from_board: bool = False,
    ) -> TaskResult:
        """Move a task to new_status and log it (no entry when nothing changed).

        Board moves are limited to the board columns; cancelling is an
        explicit action.
        """
        if from_board and new_status not in TaskStatus.board_columns():
            raise ValidationException(
                f"Status {new_status.value!r} is not a board column", field="status"
            )
        await self._visible_task(tenant_id, task_id, actor)
        change, task = await self.task_repo.update_status(tenant_id, task_id, new_status)
        if change.is_noop:
            return task
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            change.action,
            old_value=change.old_status.value,
            new_value=change.new_status.value,
        )
        logger.info(
            "Task %s status %s -> %s by %s",
            task_id,
            change.old_status.value,
            change.new_status.value,
            actor.user_id,
        )
        return task

    async def cancel(self, tenant_id: str, task_id: str, actor: Viewer) -> TaskResult:
        return await self.change_status(tenant_id, task_id, TaskStatus.CANCELLED, actor)

    async def complete(
        self,
        tenant_id: str,
        task_id: str,
        actor: Viewer,
        *,
        route_to_action_type_id: str | None = None,
        route_title: str | None = None,
        route_description: str | None = None,
    ) -> CompletionResult:
        """Complete a task and optionally open a follow-up of another action type.

        The follow-up copies client, priority and due date, and points back
        at the completed task through routed_from_task_id.
        """
        if route_to_action_type_id is not None:
            if self.action_type_repo is None or not await self.action_type_repo.get_result(
                tenant_id, route_to_action_type_id
            ):
                raise ValidationException(
                    f"Unknown action type: {route_to_action_type_id}",
                    field="route_to_action_type_id",
                )
        completed = await self.change_status(tenant_id, task_id, TaskStatus.COMPLETED, actor)
        if route_to_action_type_id is None:
            return CompletionResult(completed_task=completed)

        routed = await self.task_repo.create_task(
            tenant_id,
            TaskCreate(
                title=sanitize_text(route_title) or f"Follow-up: {completed.title}",
                description=sanitize_text(route_description) or completed.description,
                status=TaskStatus.OPEN,
                priority=completed.priority,
                source_type=TaskSourceType.ROUTED,
                source_metadata={
                    "routed_from_task_id": completed.id,
                    "routed_by": actor.user_id,
                },
                action_type_id=route_to_action_type_id,
                client_id=completed.client_id,
                due_date=completed.due_date,
                routed_from_task_id=completed.id,
            ),
            created_by=actor.user_id,
        )
        await self.activity.record(
            tenant_id,
            completed.id,
            actor.user_id,
            TaskActivityAction.ROUTED,
            new_value=routed.id,
            details=RoutingDetails(
                routed_to_task_id=routed.id, action_type_id=route_to_action_type_id
            ),
        )
        await self.activity.record(
            tenant_id,
            routed.id,
            actor.user_id,
            TaskActivityAction.CREATED,
            description=routed.title,
        )
        logger.info("Task %s completed and routed to %s", completed.id, routed.id)
        return CompletionResult(completed_task=completed, routed_task=routed)

    # ---- handoff ----

    async def hand_off(
        self,
        tenant_id: str,
        task_id: str,
        to_user_id: str,
        actor: Viewer,
        *,
        notes: str | None = None,
        can_manage: bool = False,
    ) -> TaskResult:
        """Offer a task to another member; ownership moves when they accept."""
        if to_user_id == actor.user_id:
            raise ValidationException("Cannot hand off a task to yourself", field="handoff_to")
        await self._require_member(tenant_id, to_user_id, "handoff_to")
        task = await self._visible_task(tenant_id, task_id, actor)
        if task.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED):
            raise TaskConflictException(task_id, "not_open")
        if not task.is_held_by(actor.user_id) and not can_manage:
            raise AuthorizationException(resource="taskpool", action="handoff")
        clean_notes = sanitize_text(notes) or None
        task = await self.task_repo.start_handoff(
            tenant_id, task_id, actor.user_id, to_user_id, clean_notes
        )
        if self.handoff_repo is not None:
            await self.handoff_repo.record(
                tenant_id, task_id, actor.user_id, to_user_id, clean_notes
            )
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.HANDED_OFF,
            new_value=to_user_id,
            details=HandoffDetails(
                from_user_id=actor.user_id, to_user_id=to_user_id, notes=clean_notes
            ),
        )
        logger.info("Task %s handed off by %s to %s", task_id, actor.user_id, to_user_id)
        return task

    async def accept_handoff(self, tenant_id: str, task_id: str, actor: Viewer) -> TaskResult:
        """Recipient takes ownership of a pending handoff."""
        before = await self.task_repo.get_or_raise(tenant_id, task_id)
        try:
            task = await self.task_repo.accept_handoff(tenant_id, task_id, actor.user_id)
        except TaskConflictException:
            logger.warning(
                "Handoff accept refused: task %s not pending for %s", task_id, actor.user_id
            )
            raise
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.HANDOFF_ACCEPTED,
            old_value=before.assigned_to or before.claimed_by,
            new_value=actor.user_id,
            details=HandoffDetails(
                from_user_id=before.handoff_from, to_user_id=actor.user_id
            ),
        )
        logger.info("Task %s handoff accepted by %s", task_id, actor.user_id)
        return task

    async def handoff_history(
        self, tenant_id: str, task_id: str, viewer: Viewer
    ) -> list[TaskHandoffResult]:
        await self._visible_task(tenant_id, task_id, viewer)
        if self.handoff_repo is None:
            return []
        return await self.handoff_repo.history(tenant_id, task_id)
