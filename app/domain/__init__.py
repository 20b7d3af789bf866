"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import StatusChange, TaskEntity
from app.domain.enums import (
    PrivacyDataType,
    TaskPriority,
    TaskSourceType,
    TaskStatus,
    TenantStatus,
    UserRole,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    PracticeDeskException,
    ResourceNotFoundException,
    TaskConflictException,
    TenantNotFoundException,
    ValidationException,
)
from app.domain.value_objects import ActionItemType, HexColor, TenantCode

__all__ = [
    # Entities
    "StatusChange",
    "TaskEntity",
    # Enums
    "PrivacyDataType",
    "TaskPriority",
    "TaskSourceType",
    "TaskStatus",
    "TenantStatus",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "PracticeDeskException",
    "ResourceNotFoundException",
    "TaskConflictException",
    "TenantNotFoundException",
    "ValidationException",
    # Value objects
    "ActionItemType",
    "HexColor",
    "TenantCode",
]
