"""Audit log API: tenant-scoped audit entries (who did what, when), recent and per-session views."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_audit_log_repo, get_tenant_id, require_permission
from app.application.dtos.audit_log import AuditLogFilters
from app.core.config import get_settings
from app.domain.enums import AuditCategory, AuditSeverity
from app.infrastructure.persistence.repositories import AuditLogRepository
from app.schemas.audit_log import AuditLogEntryResponse, AuditLogListResponse

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audit_log(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    _: Annotated[object, Depends(require_permission("audit", "read"))] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    resource_type: str | None = Query(None, description="Filter by resource type"),
    action: str | None = Query(None, description="Filter by action"),
    user_id: str | None = Query(None, description="Filter by user id"),
    category: AuditCategory | None = Query(None),
    severity: AuditSeverity | None = Query(None),
    search: str | None = Query(None, max_length=200, description="Match description, action or resource type"),
    from_timestamp: datetime | None = Query(None, description="From (inclusive) ISO8601"),
    to_timestamp: datetime | None = Query(None, description="To (inclusive) ISO8601"),
):
    """List audit log entries for the tenant (paginated, newest first)."""
    filters = AuditLogFilters(
        resource_type=resource_type,
        action=action,
        user_id=user_id,
        category=category,
        severity=severity,
        search=search,
        since=from_timestamp,
        until=to_timestamp,
    )
    items = await audit_repo.list(tenant_id, filters, skip=skip, limit=limit)
    total = await audit_repo.count(tenant_id, filters)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in items],
        skip=skip,
        limit=limit,
        total=total,
    )


@router.get("/recent", response_model=list[AuditLogEntryResponse])
async def recent_audit_log(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    _: Annotated[object, Depends(require_permission("audit", "read"))] = None,
    n: int | None = Query(None, ge=1, le=1000, description="How many entries (default 100)"),
):
    """The most recent entries, newest first."""
    items = await audit_repo.get_recent_logs(
        tenant_id, n or get_settings().recent_audit_log_count
    )
    return [AuditLogEntryResponse.model_validate(e) for e in items]


@router.get("/sessions/{session_id}", response_model=list[AuditLogEntryResponse])
async def session_audit_log(
    session_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    _: Annotated[object, Depends(require_permission("audit", "read"))] = None,
):
    """Everything recorded under one login session, in order."""
    items = await audit_repo.get_session_logs(tenant_id, session_id)
    return [AuditLogEntryResponse.model_validate(e) for e in items]
