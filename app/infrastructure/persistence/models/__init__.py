"""Persistence models: ORM entities and mixins.

Importing this package registers every table on Base.metadata (used by
Alembic autogenerate and by the SQLite test fixtures).
"""

from app.infrastructure.persistence.models.action_type import TaskActionType
from app.infrastructure.persistence.models.audit_log import AuditLog
from app.infrastructure.persistence.models.client import Client
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    JsonType,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.privacy_settings import UserPrivacySettings
from app.infrastructure.persistence.models.subtask import Subtask
from app.infrastructure.persistence.models.task import Task
from app.infrastructure.persistence.models.task_activity import TaskActivity
from app.infrastructure.persistence.models.task_handoff import TaskHandoff
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "Client",
    "Subtask",
    "Task",
    "TaskActionType",
    "TaskActivity",
    "TaskHandoff",
    "Tenant",
    "User",
    "UserPrivacySettings",
    "CuidMixin",
    "TenantMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "MultiTenantModel",
    "JsonType",
]
