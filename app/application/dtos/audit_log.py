"""DTOs for the audit log (append-only)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.domain.enums import AuditCategory, AuditSeverity


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update."""

    tenant_id: str
    user_id: str | None
    action: str
    resource_type: str
    resource_id: str | None = None
    category: AuditCategory = AuditCategory.API
    severity: AuditSeverity = AuditSeverity.INFO
    session_id: str | None = None
    description: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    success: bool = True
    error_message: str | None = None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit log entry (read-model for list/get)."""

    id: str
    tenant_id: str
    user_id: str | None
    session_id: str | None
    action: str
    category: AuditCategory
    severity: AuditSeverity
    resource_type: str
    resource_id: str | None
    description: str | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    details: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    request_id: str | None
    timestamp: datetime
    success: bool
    error_message: str | None


@dataclass(frozen=True)
class AuditLogFilters:
    resource_type: str | None = None
    action: str | None = None
    user_id: str | None = None
    category: AuditCategory | None = None
    severity: AuditSeverity | None = None
    search: str | None = None
    since: datetime | None = None
    until: datetime | None = None
