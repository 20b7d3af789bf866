"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, cache, permission resolver).
"""

from app.application.interfaces import (
    IActionTypeRepository,
    IAuditLogRepository,
    ICacheService,
    IClientRepository,
    IPermissionResolver,
    IPrivacySettingsRepository,
    ISubtaskRepository,
    ITaskActivityRepository,
    ITaskHandoffRepository,
    ITaskRepository,
    IUserRepository,
)
from app.application.services.authorization_service import AuthorizationService
from app.application.services.privacy_filter import PrivacyFilter

__all__ = [
    "AuthorizationService",
    "IActionTypeRepository",
    "IAuditLogRepository",
    "ICacheService",
    "IClientRepository",
    "IPermissionResolver",
    "IPrivacySettingsRepository",
    "ISubtaskRepository",
    "ITaskActivityRepository",
    "ITaskHandoffRepository",
    "ITaskRepository",
    "IUserRepository",
    "PrivacyFilter",
]
