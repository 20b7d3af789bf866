"""Task activity API: per-task timeline and comments (/tasks/{task_id}/activity)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ensure_audit_logged,
    get_task_activity_query_service,
    get_task_activity_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.user import UserResult
from app.application.use_cases.tasks import TaskActivityService
from app.core.limiter import limit_writes
from app.schemas.task_activity import CommentRequest, TaskActivityResponse

router = APIRouter()


@router.get("/{task_id}/activity", response_model=list[TaskActivityResponse])
async def list_task_activity(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    activity_svc: Annotated[TaskActivityService, Depends(get_task_activity_query_service)],
    current_user: Annotated[UserResult, Depends(require_permission("activity", "read"))],
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """Newest first; entries by members hiding their activity are left out."""
    entries = await activity_svc.list_for_task(
        tenant_id, task_id, current_user.viewer, skip=skip, limit=limit
    )
    return [TaskActivityResponse.from_result(e) for e in entries]


@router.post("/{task_id}/activity", response_model=TaskActivityResponse, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    task_id: str,
    body: CommentRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    activity_svc: Annotated[TaskActivityService, Depends(get_task_activity_service)],
    current_user: Annotated[UserResult, Depends(require_permission("activity", "create"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Comment on a task."""
    entry = await activity_svc.add_comment(
        tenant_id, task_id, current_user.viewer, body.description, body.mentions
    )
    return TaskActivityResponse.from_result(entry)
