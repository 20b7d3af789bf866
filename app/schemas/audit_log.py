"""Request/response schemas for audit log and activity API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import AuditCategory, AuditSeverity


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    user_id: str | None
    session_id: str | None = None
    action: str
    category: AuditCategory
    severity: AuditSeverity
    resource_type: str
    resource_id: str | None
    description: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    timestamp: datetime
    success: bool
    error_message: str | None = None


class AuditLogListResponse(BaseModel):
    """Paginated list of audit log entries."""

    items: list[AuditLogEntryResponse]
    skip: int
    limit: int
    total: int


class ActivityRecordRequest(BaseModel):
    """Explicit activity entry (e.g. a client-side action worth auditing)."""

    action: str = Field(..., min_length=1, max_length=100)
    resource_type: str = Field(..., min_length=1, max_length=100)
    resource_id: str | None = Field(default=None, max_length=255)
    category: AuditCategory = AuditCategory.API
    severity: AuditSeverity = AuditSeverity.INFO
    description: str | None = Field(default=None, max_length=2000)
    details: dict[str, Any] | None = None
    success: bool = True
    error_message: str | None = Field(default=None, max_length=2000)
