"""Read-side task feeds: the unassigned pool, the org feed, a member's inbox and pool stats."""

from __future__ import annotations

from app.application.dtos.action_type import ActionTypeResult
from app.application.dtos.task import (
    InboxResult,
    TaskListFilters,
    TaskPoolStats,
    TaskResult,
)
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import IActionTypeRepository, ITaskRepository
from app.application.services.privacy_filter import PrivacyFilter
from app.domain.enums import TaskSourceType

ORG_FEED_LIMIT = 100


class TaskFeedService:
    """Lists built from the task store and passed through the privacy filter."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        privacy_filter: PrivacyFilter,
        action_type_repo: IActionTypeRepository | None = None,
    ) -> None:
        self.task_repo = task_repo
        self.privacy_filter = privacy_filter
        self.action_type_repo = action_type_repo

    async def pool(
        self, tenant_id: str, viewer: Viewer, *, action_type_id: str | None = None
    ) -> list[TaskResult]:
        """Open unassigned tasks, oldest first."""
        tasks = await self.task_repo.list_unassigned(
            tenant_id, include_closed=False, action_type_id=action_type_id
        )
        return await self.privacy_filter.filter_tasks_by_privacy(tasks, viewer, tenant_id)

    async def org_feed(
        self, tenant_id: str, viewer: Viewer, *, limit: int = ORG_FEED_LIMIT
    ) -> list[TaskResult]:
        """Action items (calls, emails, document intake), newest first."""
        page = await self.task_repo.list(
            tenant_id,
            TaskListFilters(source_types=tuple(sorted(TaskSourceType.action_item_sources()))),
            skip=0,
            limit=limit,
        )
        return await self.privacy_filter.filter_tasks_by_privacy(page.items, viewer, tenant_id)

    async def my_inbox(self, tenant_id: str, viewer: Viewer) -> InboxResult:
        """The viewer's open work and the handoffs waiting for them."""
        tasks = await self.task_repo.list_by_assignee(tenant_id, viewer.user_id, open_only=True)
        handoffs = await self.task_repo.list_pending_handoffs(tenant_id, viewer.user_id)
        return InboxResult(tasks=tasks, pending_handoffs=handoffs)

    async def stats(self, tenant_id: str, viewer: Viewer) -> TaskPoolStats:
        return await self.task_repo.pool_stats(tenant_id, viewer.user_id)

    async def action_types(self, tenant_id: str) -> list[ActionTypeResult]:
        if self.action_type_repo is None:
            return []
        return await self.action_type_repo.list_active(tenant_id)
