"""Subtask operations (delegate to ISubtaskRepository; every change is logged on the parent task)."""

from __future__ import annotations

from app.application.dtos.subtask import SubtaskResult
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import ISubtaskRepository, ITaskRepository
from app.application.services.privacy_filter import PrivacyFilter
from app.application.use_cases.tasks.task_activity_operations import TaskActivityService
from app.domain.enums import TaskActivityAction
from app.domain.exceptions import ValidationException
from app.domain.value_objects.payloads import SubtaskDetails
from app.shared.utils.sanitization import sanitize_text

SUBTASK_TITLE_MAX_LENGTH = 500


def _clean_title(title: str | None) -> str:
    cleaned = sanitize_text(title) or ""
    if not cleaned:
        raise ValidationException("Subtask title is required", field="title")
    if len(cleaned) > SUBTASK_TITLE_MAX_LENGTH:
        raise ValidationException(
            f"Subtask title must be at most {SUBTASK_TITLE_MAX_LENGTH} characters",
            field="title",
        )
    return cleaned


class SubtaskService:
    def __init__(
        self,
        subtask_repo: ISubtaskRepository,
        task_repo: ITaskRepository,
        activity: TaskActivityService,
        privacy_filter: PrivacyFilter | None = None,
    ) -> None:
        self.subtask_repo = subtask_repo
        self.task_repo = task_repo
        self.activity = activity
        self.privacy_filter = privacy_filter

    async def _check_task(self, tenant_id: str, task_id: str, viewer: Viewer) -> None:
        """Parent must exist and be visible to viewer (hidden answers 404)."""
        task = await self.task_repo.get_or_raise(tenant_id, task_id)
        if self.privacy_filter is not None:
            await self.privacy_filter.ensure_task_visible(task, viewer, tenant_id)

    async def list_subtasks(
        self, tenant_id: str, task_id: str, viewer: Viewer
    ) -> list[SubtaskResult]:
        await self._check_task(tenant_id, task_id, viewer)
        return await self.subtask_repo.list_for_task(tenant_id, task_id)

    async def add_subtask(
        self, tenant_id: str, task_id: str, title: str, actor: Viewer
    ) -> SubtaskResult:
        """Append a subtask at the end of the task's list."""
        await self._check_task(tenant_id, task_id, actor)
        subtask = await self.subtask_repo.add(
            tenant_id, task_id, _clean_title(title), actor.user_id
        )
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.SUBTASK_ADDED,
            new_value=subtask.title,
            details=SubtaskDetails(subtask_id=subtask.id, title=subtask.title),
        )
        return subtask

    async def update_subtask(
        self,
        tenant_id: str,
        task_id: str,
        subtask_id: str,
        actor: Viewer,
        *,
        title: str | None = None,
        is_completed: bool | None = None,
    ) -> SubtaskResult:
        """Rename and/or toggle completion. Only a completion toggle is logged."""
        await self._check_task(tenant_id, task_id, actor)
        before, after = await self.subtask_repo.update(
            tenant_id,
            task_id,
            subtask_id,
            title=_clean_title(title) if title is not None else None,
            is_completed=is_completed,
            acting_user_id=actor.user_id,
        )
        if before.is_completed != after.is_completed:
            await self.activity.record(
                tenant_id,
                task_id,
                actor.user_id,
                TaskActivityAction.SUBTASK_COMPLETED
                if after.is_completed
                else TaskActivityAction.SUBTASK_UNCOMPLETED,
                new_value=after.title,
                details=SubtaskDetails(subtask_id=after.id, title=after.title),
            )
        return after

    async def reorder_subtasks(
        self, tenant_id: str, task_id: str, subtask_ids: list[str], actor: Viewer
    ) -> list[SubtaskResult]:
        await self._check_task(tenant_id, task_id, actor)
        return await self.subtask_repo.reorder(tenant_id, task_id, subtask_ids)

    async def delete_subtask(
        self, tenant_id: str, task_id: str, subtask_id: str, actor: Viewer
    ) -> None:
        await self._check_task(tenant_id, task_id, actor)
        removed = await self.subtask_repo.remove(tenant_id, task_id, subtask_id)
        await self.activity.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.SUBTASK_DELETED,
            old_value=removed.title,
            details=SubtaskDetails(subtask_id=removed.id, title=removed.title),
        )
