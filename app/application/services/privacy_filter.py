"""Privacy filter: post-query row-level visibility for peer data.

A row owned by another user is dropped for a non-administrator viewer only
when the owner has a settings row, has the relevant hide_* flag on, and has
not listed the viewer in visible_to_user_ids. Unowned rows and rows with no
settings row are always visible.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import TypeVar

from app.application.dtos.privacy import PrivacySettingsResult, UserStats
from app.application.dtos.task import TaskResult, UserTaskCounts
from app.application.dtos.task_activity import TaskActivityResult
from app.application.dtos.user import Viewer
from app.application.interfaces.repositories import IPrivacySettingsRepository
from app.domain.enums import PrivacyDataType
from app.domain.exceptions import ResourceNotFoundException

T = TypeVar("T")

_HIDE_FLAG: dict[PrivacyDataType, str] = {
    PrivacyDataType.TASKS: "hide_tasks_from_peers",
    PrivacyDataType.ACTIVITY: "hide_activity_from_peers",
    PrivacyDataType.PERFORMANCE: "hide_performance_from_peers",
    PrivacyDataType.CALENDAR: "hide_calendar_from_peers",
}


def is_visible(
    owner_id: str | None,
    viewer: Viewer,
    settings: PrivacySettingsResult | None,
    data_type: PrivacyDataType,
) -> bool:
    """Keep rule for one row owned by owner_id."""
    if viewer.is_administrator:
        return True
    if owner_id is None or owner_id == viewer.user_id or settings is None:
        return True
    if not getattr(settings, _HIDE_FLAG[data_type]):
        return True
    return viewer.user_id in settings.visible_to_user_ids


def apply_privacy(
    rows: Sequence[T],
    viewer: Viewer,
    settings_by_user: Mapping[str, PrivacySettingsResult],
    owner_of: Callable[[T], str | None],
    data_type: PrivacyDataType,
) -> list[T]:
    """Return the rows viewer may see, preserving order. Does not mutate rows."""
    return [
        row
        for row in rows
        if is_visible(owner_of(row), viewer, settings_by_user.get(owner_of(row) or ""), data_type)
    ]


def _owners(rows: Iterable[T], owner_of: Callable[[T], str | None], viewer: Viewer) -> set[str]:
    return {o for o in (owner_of(r) for r in rows) if o and o != viewer.user_id}


def _task_owner(task: TaskResult) -> str | None:
    return task.assigned_to


def _activity_owner(entry: TaskActivityResult) -> str | None:
    return entry.user_id


class PrivacyFilter:
    """Applies per-user privacy settings to lists read for a viewer.

    Settings for all distinct owners in a list are fetched in one query;
    administrators skip the lookup entirely.
    """

    def __init__(self, settings_repo: IPrivacySettingsRepository) -> None:
        self.settings_repo = settings_repo

    async def _filter(
        self,
        rows: Sequence[T],
        viewer: Viewer,
        tenant_id: str,
        owner_of: Callable[[T], str | None],
        data_type: PrivacyDataType,
    ) -> list[T]:
        if viewer.is_administrator or not rows:
            return list(rows)
        owners = _owners(rows, owner_of, viewer)
        settings = await self.settings_repo.get_for_users(tenant_id, owners) if owners else {}
        return apply_privacy(rows, viewer, settings, owner_of, data_type)

    async def filter_tasks_by_privacy(
        self, tasks: Sequence[TaskResult], viewer: Viewer, tenant_id: str
    ) -> list[TaskResult]:
        """Drop tasks whose assignee hides tasks from this viewer."""
        return await self._filter(tasks, viewer, tenant_id, _task_owner, PrivacyDataType.TASKS)

    async def ensure_task_visible(
        self, task: TaskResult, viewer: Viewer, tenant_id: str
    ) -> TaskResult:
        """Return task, or raise ResourceNotFoundException when it is hidden from viewer.

        A hidden task answers like a missing one, for reads and writes alike.
        """
        if not await self.filter_tasks_by_privacy([task], viewer, tenant_id):
            raise ResourceNotFoundException("task", task.id)
        return task

    async def filter_activity_by_privacy(
        self, entries: Sequence[TaskActivityResult], viewer: Viewer, tenant_id: str
    ) -> list[TaskActivityResult]:
        """Drop activity rows whose actor hides activity from this viewer."""
        return await self._filter(
            entries, viewer, tenant_id, _activity_owner, PrivacyDataType.ACTIVITY
        )

    async def can_view_user_data(
        self,
        viewer: Viewer,
        target_user_id: str,
        data_type: PrivacyDataType,
        tenant_id: str,
    ) -> bool:
        if viewer.is_administrator or target_user_id == viewer.user_id:
            return True
        settings = await self.settings_repo.get(tenant_id, target_user_id)
        return is_visible(target_user_id, viewer, settings, data_type)

    async def get_user_stats_with_privacy(
        self,
        viewer: Viewer,
        target_user_id: str,
        tenant_id: str,
        load_counts: Callable[[], Awaitable[UserTaskCounts]],
    ) -> UserStats:
        """Stats for target_user_id, or UserStats.hidden when performance is hidden.

        load_counts is only awaited when the viewer may see the numbers.
        """
        if not await self.can_view_user_data(
            viewer, target_user_id, PrivacyDataType.PERFORMANCE, tenant_id
        ):
            return UserStats.hidden(target_user_id)
        counts = await load_counts()
        return UserStats(
            user_id=target_user_id,
            visible=True,
            tasks_completed=counts.tasks_completed,
            tasks_in_progress=counts.tasks_in_progress,
            avg_completion_minutes=counts.avg_completion_minutes,
        )
