"""API audit log service: writes to the append-only audit_log table."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.audit_log import AuditLogEntryCreate, AuditLogResult
from app.domain.enums import AuditCategory, AuditSeverity
from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository


class ApiAuditLogService:
    """Logs API actions to audit_log on the caller's session (same transaction as the change)."""

    def __init__(self, db: AsyncSession) -> None:
        self._repo = AuditLogRepository(db)

    async def log_action(
        self,
        tenant_id: str,
        user_id: str | None,
        action: str,
        resource_type: str,
        resource_id: str | None = None,
        *,
        category: AuditCategory = AuditCategory.API,
        severity: AuditSeverity = AuditSeverity.INFO,
        session_id: str | None = None,
        description: str | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
        success: bool = True,
        error_message: str | None = None,
    ) -> AuditLogResult:
        """Append one audit log entry."""
        entry = AuditLogEntryCreate(
            tenant_id=tenant_id,
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            category=category,
            severity=severity,
            session_id=session_id,
            description=description,
            old_values=old_values,
            new_values=new_values,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
            request_id=request_id,
            success=success,
            error_message=error_message,
        )
        return await self._repo.create(entry)
