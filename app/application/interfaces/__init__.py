"""Application interfaces (ports): repository and service protocols.

No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IActionTypeRepository,
    IAuditLogRepository,
    IClientRepository,
    IPrivacySettingsRepository,
    ISubtaskRepository,
    ITaskActivityRepository,
    ITaskHandoffRepository,
    ITaskRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    ICacheService,
    IPermissionResolver,
)

__all__ = [
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
]
