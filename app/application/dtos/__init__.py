"""Application DTOs (no ORM dependency)."""

from app.application.dtos.action_type import (
    DEFAULT_ACTION_TYPES,
    ActionTypeResult,
    ActionTypeSeed,
)
from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilters,
    AuditLogResult,
)
from app.application.dtos.privacy import (
    PrivacySettingsResult,
    PrivacySettingsUpdate,
    UserStats,
)
from app.application.dtos.subtask import SubtaskResult
from app.application.dtos.task import (
    ActionItemCreate,
    InboxResult,
    TaskCreate,
    TaskHandoffResult,
    TaskListFilters,
    TaskPage,
    TaskPoolStats,
    TaskResult,
    UserTaskCounts,
)
from app.application.dtos.task_activity import TaskActivityCreate, TaskActivityResult
from app.application.dtos.tenant import TenantResult
from app.application.dtos.user import UserResult, Viewer

__all__ = [
    "ActionItemCreate",
    "ActionTypeResult",
    "ActionTypeSeed",
    "AuditLogEntryCreate",
    "AuditLogFilters",
    "AuditLogResult",
    "DEFAULT_ACTION_TYPES",
    "InboxResult",
    "PrivacySettingsResult",
    "PrivacySettingsUpdate",
    "SubtaskResult",
    "TaskActivityCreate",
    "TaskActivityResult",
    "TaskCreate",
    "TaskHandoffResult",
    "TaskListFilters",
    "TaskPage",
    "TaskPoolStats",
    "TaskResult",
    "TenantResult",
    "UserResult",
    "UserStats",
    "UserTaskCounts",
    "Viewer",
]
