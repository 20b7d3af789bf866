"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.action_type_repo import (
    ActionTypeRepository,
)
from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.client_repo import ClientRepository
from app.infrastructure.persistence.repositories.privacy_settings_repo import (
    PrivacySettingsRepository,
)
from app.infrastructure.persistence.repositories.subtask_repo import SubtaskRepository
from app.infrastructure.persistence.repositories.task_activity_repo import (
    TaskActivityRepository,
)
from app.infrastructure.persistence.repositories.task_handoff_repo import (
    TaskHandoffRepository,
)
from app.infrastructure.persistence.repositories.task_repo import TaskRepository
from app.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ActionTypeRepository",
    "AuditLogRepository",
    "BaseRepository",
    "ClientRepository",
    "PrivacySettingsRepository",
    "SubtaskRepository",
    "TaskActivityRepository",
    "TaskHandoffRepository",
    "TaskRepository",
    "TenantRepository",
    "UserRepository",
]
