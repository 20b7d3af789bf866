"""Activity API: the tenant's audit trail as an activity list, and explicit activity records.

GET is scoped to the caller unless they can read the audit log.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_api_audit_log_service,
    get_audit_log_repo,
    get_authorization_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.audit_log import AuditLogFilters
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.core.limiter import limit_writes
from app.infrastructure.persistence.repositories import AuditLogRepository
from app.infrastructure.services import ApiAuditLogService
from app.schemas.audit_log import (
    ActivityRecordRequest,
    AuditLogEntryResponse,
    AuditLogListResponse,
)
from app.shared.context import get_current_session_id
from app.shared.request_audit import get_audit_request_context
from app.shared.utils.sanitization import sanitize_text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_activity(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    audit_repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("activity", "read"))],
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    resource_type: str | None = Query(None),
    user_id: str | None = Query(None),
):
    """Recent activity, newest first. Members without audit:read see only their own."""
    if not await auth_svc.check_permission(current_user.id, tenant_id, "audit", "read"):
        user_id = current_user.id
    filters = AuditLogFilters(resource_type=resource_type, user_id=user_id)
    items = await audit_repo.list(tenant_id, filters, skip=skip, limit=limit)
    total = await audit_repo.count(tenant_id, filters)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in items],
        skip=skip,
        limit=limit,
        total=total,
    )


@router.post("", response_model=AuditLogEntryResponse, status_code=201)
@limit_writes
async def record_activity(
    request: Request,
    body: ActivityRecordRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    audit_svc: Annotated[ApiAuditLogService, Depends(get_api_audit_log_service)],
    current_user: Annotated[UserResult, Depends(require_permission("activity", "create"))],
):
    """Record an explicit activity entry for the caller."""
    request_id, ip_address, user_agent = get_audit_request_context(request)
    entry = await audit_svc.log_action(
        tenant_id=tenant_id,
        user_id=current_user.id,
        action=body.action,
        resource_type=body.resource_type,
        resource_id=body.resource_id,
        category=body.category,
        severity=body.severity,
        session_id=get_current_session_id(),
        description=sanitize_text(body.description) or None,
        details=body.details,
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
        success=body.success,
        error_message=body.error_message,
    )
    logger.info("Activity %s on %s recorded by %s", body.action, body.resource_type, current_user.id)
    return AuditLogEntryResponse.model_validate(entry)
