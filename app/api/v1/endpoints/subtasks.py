"""Subtask API: checklist items under a task (/tasks/{task_id}/subtasks)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    ensure_audit_logged,
    get_subtask_query_service,
    get_subtask_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.user import UserResult
from app.application.use_cases.tasks import SubtaskService
from app.core.limiter import limit_writes
from app.schemas.subtask import (
    SubtaskCreateRequest,
    SubtaskReorderRequest,
    SubtaskResponse,
    SubtaskUpdate,
)

router = APIRouter()


@router.get("/{task_id}/subtasks", response_model=list[SubtaskResponse])
async def list_subtasks(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    subtask_svc: Annotated[SubtaskService, Depends(get_subtask_query_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
):
    """Subtasks in position order."""
    items = await subtask_svc.list_subtasks(tenant_id, task_id, current_user.viewer)
    return [SubtaskResponse.model_validate(s) for s in items]


@router.post("/{task_id}/subtasks", response_model=SubtaskResponse, status_code=201)
@limit_writes
async def add_subtask(
    request: Request,
    task_id: str,
    body: SubtaskCreateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    subtask_svc: Annotated[SubtaskService, Depends(get_subtask_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Append a subtask (position after the current last one)."""
    created = await subtask_svc.add_subtask(
        tenant_id, task_id, body.title, current_user.viewer
    )
    return SubtaskResponse.model_validate(created)


@router.put("/{task_id}/subtasks", response_model=list[SubtaskResponse])
@limit_writes
async def reorder_subtasks(
    request: Request,
    task_id: str,
    body: SubtaskReorderRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    subtask_svc: Annotated[SubtaskService, Depends(get_subtask_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Set positions from the given id order (must list every subtask of the task)."""
    items = await subtask_svc.reorder_subtasks(
        tenant_id, task_id, body.subtask_ids, current_user.viewer
    )
    return [SubtaskResponse.model_validate(s) for s in items]


@router.patch("/{task_id}/subtasks/{subtask_id}", response_model=SubtaskResponse)
@limit_writes
async def update_subtask(
    request: Request,
    task_id: str,
    subtask_id: str,
    body: SubtaskUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    subtask_svc: Annotated[SubtaskService, Depends(get_subtask_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Rename and/or complete a subtask."""
    updated = await subtask_svc.update_subtask(
        tenant_id,
        task_id,
        subtask_id,
        current_user.viewer,
        title=body.title,
        is_completed=body.is_completed,
    )
    return SubtaskResponse.model_validate(updated)


@router.delete("/{task_id}/subtasks/{subtask_id}", status_code=204)
@limit_writes
async def delete_subtask(
    request: Request,
    task_id: str,
    subtask_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    subtask_svc: Annotated[SubtaskService, Depends(get_subtask_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    await subtask_svc.delete_subtask(tenant_id, task_id, subtask_id, current_user.viewer)
    return Response(status_code=204)
