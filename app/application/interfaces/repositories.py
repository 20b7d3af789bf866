"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.action_type import ActionTypeResult
    from app.application.dtos.audit_log import (
        AuditLogEntryCreate,
        AuditLogFilters,
        AuditLogResult,
    )
    from app.application.dtos.privacy import PrivacySettingsResult, PrivacySettingsUpdate
    from app.application.dtos.subtask import SubtaskResult
    from app.application.dtos.task import (
        TaskCreate,
        TaskHandoffResult,
        TaskListFilters,
        TaskPage,
        TaskPoolStats,
        TaskResult,
        UserTaskCounts,
    )
    from app.application.dtos.task_activity import TaskActivityCreate, TaskActivityResult
    from app.application.dtos.user import UserResult
    from app.domain.entities.task import StatusChange
    from app.domain.enums import TaskStatus, UserRole


class ITaskRepository(Protocol):
    """Task store: pool queries and ownership transitions."""

    async def get(self, tenant_id: str, task_id: str) -> TaskResult | None: ...

    async def get_or_raise(self, tenant_id: str, task_id: str) -> TaskResult: ...

    async def list_unassigned(
        self,
        tenant_id: str,
        *,
        include_closed: bool = True,
        action_type_id: str | None = None,
    ) -> list[TaskResult]: ...

    async def list_by_assignee(
        self, tenant_id: str, user_id: str, *, open_only: bool = False
    ) -> list[TaskResult]: ...

    async def list_pending_handoffs(self, tenant_id: str, user_id: str) -> list[TaskResult]: ...

    async def list(
        self,
        tenant_id: str,
        filters: TaskListFilters,
        *,
        user_id: str | None = None,
        skip: int = 0,
        limit: int = 50,
        now: datetime | None = None,
    ) -> TaskPage: ...

    async def create_task(
        self, tenant_id: str, data: TaskCreate, *, created_by: str | None
    ) -> TaskResult: ...

    async def update_fields(
        self, tenant_id: str, task_id: str, changes: dict[str, Any]
    ) -> TaskResult: ...

    async def update_status(
        self,
        tenant_id: str,
        task_id: str,
        new_status: TaskStatus,
        *,
        now: datetime | None = None,
    ) -> tuple[StatusChange, TaskResult]: ...

    async def claim(
        self, tenant_id: str, task_id: str, user_id: str, *, now: datetime | None = None
    ) -> TaskResult: ...

    async def assign(
        self,
        tenant_id: str,
        task_id: str,
        user_id: str,
        acting_user_id: str,
        *,
        now: datetime | None = None,
    ) -> TaskResult: ...

    async def release(
        self, tenant_id: str, task_id: str, *, now: datetime | None = None
    ) -> TaskResult: ...

    async def start_handoff(
        self,
        tenant_id: str,
        task_id: str,
        from_user_id: str,
        to_user_id: str,
        notes: str | None,
        *,
        now: datetime | None = None,
    ) -> TaskResult: ...

    async def accept_handoff(
        self, tenant_id: str, task_id: str, user_id: str, *, now: datetime | None = None
    ) -> TaskResult: ...

    async def delete_task(self, tenant_id: str, task_id: str) -> None: ...

    async def pool_stats(
        self, tenant_id: str, user_id: str, *, now: datetime | None = None
    ) -> TaskPoolStats: ...

    async def user_counts(self, tenant_id: str, user_id: str) -> UserTaskCounts: ...


class ITaskActivityRepository(Protocol):
    async def append(self, tenant_id: str, entry: TaskActivityCreate) -> TaskActivityResult: ...

    async def list_for_task(
        self, tenant_id: str, task_id: str, *, skip: int = 0, limit: int = 50
    ) -> list[TaskActivityResult]: ...


class ITaskHandoffRepository(Protocol):
    async def record(
        self,
        tenant_id: str,
        task_id: str,
        from_user_id: str | None,
        to_user_id: str,
        notes: str | None,
    ) -> TaskHandoffResult: ...

    async def history(self, tenant_id: str, task_id: str) -> list[TaskHandoffResult]: ...


class ISubtaskRepository(Protocol):
    async def list_for_task(self, tenant_id: str, task_id: str) -> list[SubtaskResult]: ...

    async def add(
        self, tenant_id: str, task_id: str, title: str, created_by: str | None
    ) -> SubtaskResult: ...

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
    ) -> tuple[SubtaskResult, SubtaskResult]: ...

    async def reorder(
        self, tenant_id: str, task_id: str, ordered_ids: list[str]
    ) -> list[SubtaskResult]: ...

    async def remove(self, tenant_id: str, task_id: str, subtask_id: str) -> SubtaskResult: ...


class IPrivacySettingsRepository(Protocol):
    """Batch lookup of per-user privacy settings (absent user = no row)."""

    async def get_for_users(
        self, tenant_id: str, user_ids: Iterable[str]
    ) -> dict[str, PrivacySettingsResult]: ...

    async def get(self, tenant_id: str, user_id: str) -> PrivacySettingsResult | None: ...

    async def upsert(
        self, tenant_id: str, user_id: str, update: PrivacySettingsUpdate
    ) -> PrivacySettingsResult: ...


class IUserRepository(Protocol):
    async def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> UserResult | None: ...

    async def existing_ids(self, tenant_id: str, user_ids: set[str]) -> set[str]: ...

    async def get_roles(self, tenant_id: str, user_ids: set[str]) -> dict[str, UserRole]: ...

    async def list_team(self, tenant_id: str) -> list[UserResult]: ...


class IActionTypeRepository(Protocol):
    async def list_active(self, tenant_id: str) -> list[ActionTypeResult]: ...

    async def get_result(self, tenant_id: str, action_type_id: str) -> ActionTypeResult | None: ...

    async def get_by_code(self, tenant_id: str, code: str) -> ActionTypeResult | None: ...


class IClientRepository(Protocol):
    async def exists(self, tenant_id: str, client_id: str) -> bool: ...


class IAuditLogRepository(Protocol):
    """Append-only audit log."""

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult: ...

    async def list(
        self,
        tenant_id: str,
        filters: AuditLogFilters | None = None,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> list[AuditLogResult]: ...

    async def count(self, tenant_id: str, filters: AuditLogFilters | None = None) -> int: ...

    async def get_recent_logs(self, tenant_id: str, n: int = 100) -> list[AuditLogResult]: ...

    async def get_session_logs(
        self, tenant_id: str, session_id: str, *, limit: int = 1000
    ) -> list[AuditLogResult]: ...
