"""Task operations: create, from-action, get, list, partial update, delete."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from app.application.dtos.task import (
    ActionItemCreate,
    TaskCreate,
    TaskListFilters,
    TaskPage,
    TaskResult,
)
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import (
    IActionTypeRepository,
    IClientRepository,
    ITaskRepository,
    IUserRepository,
)
from app.application.services.privacy_filter import PrivacyFilter
from app.application.use_cases.tasks.task_activity_operations import TaskActivityService
from app.application.use_cases.tasks.task_assignment import TaskAssignmentService
from app.domain.enums import TaskActivityAction, TaskPriority, TaskSourceType, TaskStatus
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import ActionItemType
from app.domain.value_objects.payloads import ChangeSetDetails, FieldChange
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 500


def _clean_title(title: str | None) -> str:
    cleaned = sanitize_text(title) or ""
    if not cleaned:
        raise ValidationException("Task title is required", field="title")
    if len(cleaned) > TITLE_MAX_LENGTH:
        raise ValidationException(
            f"Task title must be at most {TITLE_MAX_LENGTH} characters", field="title"
        )
    return cleaned


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (TaskPriority, TaskStatus)):
        return value.value
    return str(value)


class TaskService:
    """Create, read and edit tasks (tenant-scoped, privacy-filtered reads)."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        activity: TaskActivityService,
        assignment: TaskAssignmentService,
        privacy_filter: PrivacyFilter,
        action_type_repo: IActionTypeRepository,
        client_repo: IClientRepository,
        user_repo: IUserRepository,
    ) -> None:
        self.task_repo = task_repo
        self.activity = activity
        self.assignment = assignment
        self.privacy_filter = privacy_filter
        self.action_type_repo = action_type_repo
        self.client_repo = client_repo
        self.user_repo = user_repo

    async def _validate_refs(
        self,
        tenant_id: str,
        *,
        action_type_id: str | None = None,
        client_id: str | None = None,
        assigned_to: str | None = None,
    ) -> None:
        if action_type_id and not await self.action_type_repo.get_result(
            tenant_id, action_type_id
        ):
            raise ValidationException(
                f"Unknown action type: {action_type_id}", field="action_type_id"
            )
        if client_id and not await self.client_repo.exists(tenant_id, client_id):
            raise ValidationException(f"Unknown client: {client_id}", field="client_id")
        if assigned_to and not await self.user_repo.existing_ids(tenant_id, {assigned_to}):
            raise ValidationException(
                f"Unknown or inactive user: {assigned_to}", field="assigned_to"
            )

    async def create_task(self, tenant_id: str, data: TaskCreate, actor: Viewer) -> TaskResult:
        """Create a task and log it as created (and assigned, when an assignee is given)."""
        data = replace(
            data,
            title=_clean_title(data.title),
            description=sanitize_text(data.description) or None,
        )
        await self._validate_refs(
            tenant_id,
            action_type_id=data.action_type_id,
            client_id=data.client_id,
            assigned_to=data.assigned_to,
        )
        try:
            task = await self.task_repo.create_task(tenant_id, data, created_by=actor.user_id)
        except ValueError as e:
            # pydantic ValidationError for malformed source metadata
            raise ValidationException(str(e), field="source_metadata") from e
        await self.activity.record(
            tenant_id, task.id, actor.user_id, TaskActivityAction.CREATED, description=task.title
        )
        if task.assigned_to:
            await self.activity.record(
                tenant_id,
                task.id,
                actor.user_id,
                TaskActivityAction.ASSIGNED,
                new_value=task.assigned_to,
            )
        logger.info("Task %s created by %s (source=%s)", task.id, actor.user_id, task.source_type.value)
        return task

    async def create_from_action(
        self, tenant_id: str, item: ActionItemCreate, actor: Viewer
    ) -> TaskResult:
        """Turn an inbound action item into a pending task.

        The item type maps to one of the tenant's action type codes; a code
        the tenant has not seeded leaves the task without an action type.
        """
        if item.source_type not in TaskSourceType.action_item_sources():
            raise ValidationException(
                f"Action items come from {sorted(s.value for s in TaskSourceType.action_item_sources())}",
                field="source_type",
            )
        try:
            item_type = ActionItemType(item.action_item_type)
        except ValueError as e:
            raise ValidationException(str(e), field="action_item_type") from e
        action_type = await self.action_type_repo.get_by_code(
            tenant_id, item_type.action_type_code
        )
        metadata = dict(item.source_metadata or {})
        metadata["action_item_type"] = item_type.value
        metadata["created_from_action_item"] = True
        return await self.create_task(
            tenant_id,
            TaskCreate(
                title=item.title,
                description=item.description,
                status=TaskStatus.PENDING,
                priority=item.priority,
                source_type=item.source_type,
                source_metadata=metadata,
                source_email_id=item.source_email_id,
                action_type_id=action_type.id if action_type else None,
                client_id=item.client_id,
                assigned_to=item.assigned_to,
                due_date=item.due_date,
            ),
            actor,
        )

    async def get_task(self, tenant_id: str, task_id: str, viewer: Viewer) -> TaskResult:
        """Return the task, or ResourceNotFoundException when missing or hidden from viewer."""
        task = await self.task_repo.get_or_raise(tenant_id, task_id)
        return await self.privacy_filter.ensure_task_visible(task, viewer, tenant_id)

    async def list_tasks(
        self,
        tenant_id: str,
        viewer: Viewer,
        filters: TaskListFilters,
        *,
        own_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> TaskPage:
        """Filtered page for viewer. own_only limits to tasks the viewer created or holds.

        total counts matching rows before privacy filtering.
        """
        if own_only:
            filters = replace(filters, visible_to_user_id=viewer.user_id)
        page = await self.task_repo.list(
            tenant_id, filters, user_id=viewer.user_id, skip=skip, limit=limit
        )
        items = await self.privacy_filter.filter_tasks_by_privacy(page.items, viewer, tenant_id)
        return replace(page, items=items)

    async def update_task(
        self,
        tenant_id: str,
        task_id: str,
        changes: dict[str, Any],
        actor: Viewer,
    ) -> TaskResult:
        """Apply a partial update.

        status and assigned_to go through the assignment service (their own
        activity entries); the remaining fields are logged as one change set.
        """
        changes = dict(changes)
        new_status = changes.pop("status", None)
        has_assignee = "assigned_to" in changes
        new_assignee = changes.pop("assigned_to", None)

        before = await self.get_task(tenant_id, task_id, actor)
        if "title" in changes:
            changes["title"] = _clean_title(changes["title"])
        if "description" in changes:
            changes["description"] = sanitize_text(changes["description"]) or None
        await self._validate_refs(
            tenant_id,
            action_type_id=changes.get("action_type_id"),
            client_id=changes.get("client_id"),
        )

        task = before
        diff = {
            key: FieldChange(old=_as_text(getattr(before, key)), new=_as_text(value))
            for key, value in changes.items()
            if getattr(before, key) != value
        }
        if diff:
            task = await self.task_repo.update_fields(
                tenant_id, task_id, {key: changes[key] for key in diff}
            )
            await self.activity.record(
                tenant_id,
                task_id,
                actor.user_id,
                TaskActivityAction.UPDATED,
                description=", ".join(sorted(diff)),
                details=ChangeSetDetails(changes=diff),
            )
        if new_status is not None:
            task = await self.assignment.change_status(
                tenant_id, task_id, TaskStatus(new_status), actor
            )
        if has_assignee:
            if new_assignee:
                task = await self.assignment.assign(tenant_id, task_id, new_assignee, actor)
            elif not task.is_unassigned:
                task = await self.assignment.unassign(tenant_id, task_id, actor)
        return task

    async def delete_task(self, tenant_id: str, task_id: str, actor: Viewer) -> None:
        """Hard delete; subtasks, activity and handoff history go with it."""
        await self.task_repo.delete_task(tenant_id, task_id)
        logger.info("Task %s deleted by %s", task_id, actor.user_id)
