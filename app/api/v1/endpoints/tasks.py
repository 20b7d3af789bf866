"""Task API: thin routes delegating to TaskService.

Reads are privacy filtered for the caller. Members without task:view_all
only see tasks they created, hold or claimed.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import (
    ensure_audit_logged,
    get_authorization_service,
    get_task_query_service,
    get_task_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.task import ActionItemCreate, TaskCreate, TaskListFilters
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.application.use_cases.tasks import TaskService
from app.core.config import get_settings
from app.core.limiter import limit_writes
from app.domain.enums import TaskPriority, TaskSourceType, TaskStatus, TaskView
from app.schemas.task import (
    ActionItemRequest,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)

router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_query_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
    view: TaskView | None = Query(None, description="pool, my_assigned, my_claimed, overdue"),
    status: TaskStatus | None = Query(None),
    priority: TaskPriority | None = Query(None),
    assigned_to: str | None = Query(None),
    client_id: str | None = Query(None),
    action_type_id: str | None = Query(None),
    source_type: TaskSourceType | None = Query(None),
    search: str | None = Query(None, max_length=200),
):
    """List tasks (newest first). total is the match count before privacy filtering."""
    settings = get_settings()
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    can_view_all = await auth_svc.check_permission(
        current_user.id, tenant_id, "task", "view_all"
    )
    page = await task_svc.list_tasks(
        tenant_id,
        current_user.viewer,
        TaskListFilters(
            view=view,
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            client_id=client_id,
            action_type_id=action_type_id,
            source_type=source_type,
            search=search,
        ),
        own_only=not can_view_all,
        skip=skip,
        limit=page_size,
    )
    return TaskListResponse(
        items=[TaskResponse.from_result(t) for t in page.items],
        total=page.total,
        skip=page.skip,
        limit=page.limit,
    )


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "create"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Create a task (manual entry unless source_type says otherwise)."""
    if body.assigned_to and body.assigned_to != current_user.id:
        await auth_svc.require_permission(current_user.id, tenant_id, "taskpool", "assign")
    created = await task_svc.create_task(
        tenant_id,
        TaskCreate(**body.model_dump()),
        current_user.viewer,
    )
    return TaskResponse.from_result(created)


@router.post("/from-action", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task_from_action(
    request: Request,
    body: ActionItemRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "create"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Turn a call, email or document action item into a pending task."""
    created = await task_svc.create_from_action(
        tenant_id,
        ActionItemCreate(**body.model_dump()),
        current_user.viewer,
    )
    return TaskResponse.from_result(created)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_query_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
):
    """Get one task; 404 when missing or hidden by the holder's privacy settings."""
    task = await task_svc.get_task(tenant_id, task_id, current_user.viewer)
    return TaskResponse.from_result(task)


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Partial update. Changing assigned_to requires taskpool:assign."""
    changes = body.model_dump(exclude_unset=True)
    if "assigned_to" in changes:
        await auth_svc.require_permission(current_user.id, tenant_id, "taskpool", "assign")
    updated = await task_svc.update_task(tenant_id, task_id, changes, current_user.viewer)
    return TaskResponse.from_result(updated)


@router.delete("/{task_id}", status_code=204)
@limit_writes
async def delete_task(
    request: Request,
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "delete"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Hard delete a task with its subtasks, activity and handoff history."""
    await task_svc.delete_task(tenant_id, task_id, current_user.viewer)
    return Response(status_code=204)
