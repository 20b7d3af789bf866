"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.api_audit_log_service import ApiAuditLogService
from app.infrastructure.services.permission_resolver import (
    ROLE_PERMISSIONS,
    PermissionResolver,
    permissions_for_role,
)

__all__ = [
    "ApiAuditLogService",
    "PermissionResolver",
    "ROLE_PERMISSIONS",
    "permissions_for_role",
]
