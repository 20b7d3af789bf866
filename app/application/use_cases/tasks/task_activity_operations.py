"""Task activity: append entries for every task transition, list and comment."""

from __future__ import annotations

from app.application.dtos.task_activity import TaskActivityCreate, TaskActivityResult
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import (
    ITaskActivityRepository,
    ITaskRepository,
)
from app.application.services.privacy_filter import PrivacyFilter
from app.domain.enums import TaskActivityAction
from app.domain.exceptions import ValidationException
from app.domain.value_objects.payloads import ActivityDetails, CommentDetails
from app.shared.utils.sanitization import sanitize_text


class TaskActivityService:
    """Append-only task activity log.

    record() is called by the task, assignment and subtask services on the
    same session as their mutation, so an entry never outlives a rolled
    back change (and vice versa).
    """

    def __init__(
        self,
        activity_repo: ITaskActivityRepository,
        task_repo: ITaskRepository,
        privacy_filter: PrivacyFilter | None = None,
    ) -> None:
        self.activity_repo = activity_repo
        self.task_repo = task_repo
        self.privacy_filter = privacy_filter

    async def record(
        self,
        tenant_id: str,
        task_id: str,
        user_id: str | None,
        action: TaskActivityAction,
        *,
        description: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
        details: ActivityDetails | None = None,
    ) -> TaskActivityResult:
        return await self.activity_repo.append(
            tenant_id,
            TaskActivityCreate(
                task_id=task_id,
                user_id=user_id,
                action=action,
                description=description,
                old_value=old_value,
                new_value=new_value,
                details=details,
            ),
        )

    async def _check_task(self, tenant_id: str, task_id: str, viewer: Viewer) -> None:
        task = await self.task_repo.get_or_raise(tenant_id, task_id)
        if self.privacy_filter is not None:
            await self.privacy_filter.ensure_task_visible(task, viewer, tenant_id)

    async def list_for_task(
        self,
        tenant_id: str,
        task_id: str,
        viewer: Viewer,
        *,
        skip: int = 0,
        limit: int = 50,
    ) -> list[TaskActivityResult]:
        """Newest first; rows by users hiding their activity are dropped for peers."""
        await self._check_task(tenant_id, task_id, viewer)
        entries = await self.activity_repo.list_for_task(
            tenant_id, task_id, skip=skip, limit=limit
        )
        if self.privacy_filter is None:
            return entries
        return await self.privacy_filter.filter_activity_by_privacy(entries, viewer, tenant_id)

    async def add_comment(
        self,
        tenant_id: str,
        task_id: str,
        actor: Viewer,
        text: str,
        mentions: list[str] | None = None,
    ) -> TaskActivityResult:
        """Add a comment entry. Text is sanitized and must not be empty."""
        await self._check_task(tenant_id, task_id, actor)
        body = sanitize_text(text)
        if not body:
            raise ValidationException("Comment text is required", field="description")
        return await self.record(
            tenant_id,
            task_id,
            actor.user_id,
            TaskActivityAction.COMMENT,
            description=body,
            details=CommentDetails(mentions=list(dict.fromkeys(mentions or []))),
        )
