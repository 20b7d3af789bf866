"""Task pool API: claim/release, assign, kanban status, completion with routing, handoffs.

Claim and handoff accept are compare-and-set updates; losing a race answers
409 with the current state left untouched.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ensure_audit_logged,
    get_authorization_service,
    get_handoff_history_service,
    get_task_assignment_service,
    get_task_feed_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.application.use_cases.feeds import TaskFeedService
from app.application.use_cases.tasks import TaskAssignmentService
from app.core.limiter import limit_claims, limit_writes
from app.schemas.task import TaskResponse
from app.schemas.taskpool import (
    ActionTypeResponse,
    AssignRequest,
    CompleteRequest,
    CompleteResponse,
    HandoffHistoryItem,
    HandoffRequest,
    PoolStatsResponse,
    StatusChangeRequest,
)

router = APIRouter()


async def _can_manage(auth_svc: AuthorizationService, user: UserResult, tenant_id: str) -> bool:
    return await auth_svc.check_permission(user.id, tenant_id, "taskpool", "manage")


@router.get("/tasks", response_model=list[TaskResponse])
async def list_pool(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    feed_svc: Annotated[TaskFeedService, Depends(get_task_feed_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "read"))],
    action_type_id: str | None = Query(None),
):
    """Open, unassigned tasks (oldest first)."""
    tasks = await feed_svc.pool(tenant_id, current_user.viewer, action_type_id=action_type_id)
    return [TaskResponse.from_result(t) for t in tasks]


@router.get("/stats", response_model=PoolStatsResponse)
async def pool_stats(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    feed_svc: Annotated[TaskFeedService, Depends(get_task_feed_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "read"))],
):
    """Counts by status, pool size, the caller's claims, overdue and today's completions."""
    stats = await feed_svc.stats(tenant_id, current_user.viewer)
    return PoolStatsResponse.model_validate(stats)


@router.get("/action-types", response_model=list[ActionTypeResponse])
async def list_action_types(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    feed_svc: Annotated[TaskFeedService, Depends(get_task_feed_service)],
    _: Annotated[object, Depends(require_permission("taskpool", "read"))] = None,
):
    """Active action types in display order."""
    items = await feed_svc.action_types(tenant_id)
    return [ActionTypeResponse.model_validate(a) for a in items]


@router.post("/tasks/{task_id}/claim", response_model=TaskResponse)
@limit_claims
async def claim_task(
    request: Request,
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "claim"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Claim an unassigned task. 409 when someone else got it first."""
    task = await assignment.claim(tenant_id, task_id, current_user.viewer)
    return TaskResponse.from_result(task)


@router.delete("/tasks/{task_id}/claim", response_model=TaskResponse)
@limit_claims
async def release_task(
    request: Request,
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "claim"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Return the task to the pool (holder, or a pool manager)."""
    task = await assignment.release(
        tenant_id,
        task_id,
        current_user.viewer,
        can_manage=await _can_manage(auth_svc, current_user, tenant_id),
    )
    return TaskResponse.from_result(task)


@router.post("/tasks/{task_id}/assign", response_model=TaskResponse)
@limit_writes
async def assign_task(
    request: Request,
    task_id: str,
    body: AssignRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "assign"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    task = await assignment.assign(tenant_id, task_id, body.user_id, current_user.viewer)
    return TaskResponse.from_result(task)


@router.delete("/tasks/{task_id}/assign", response_model=TaskResponse)
@limit_writes
async def unassign_task(
    request: Request,
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("taskpool", "assign"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    task = await assignment.unassign(tenant_id, task_id, current_user.viewer)
    return TaskResponse.from_result(task)


@router.post("/tasks/{task_id}/status", response_model=TaskResponse)
@limit_writes
async def change_status(
    request: Request,
    task_id: str,
    body: StatusChangeRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Move a task between statuses (kanban moves are limited to board columns)."""
    task = await assignment.change_status(
        tenant_id, task_id, body.status, current_user.viewer, from_board=body.from_board
    )
    return TaskResponse.from_result(task)


@router.post("/tasks/{task_id}/complete", response_model=CompleteResponse)
@limit_writes
async def complete_task(
    request: Request,
    task_id: str,
    body: CompleteRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Complete the task; with route_to_action_type_id also open a follow-up task."""
    result = await assignment.complete(
        tenant_id,
        task_id,
        current_user.viewer,
        route_to_action_type_id=body.route_to_action_type_id,
        route_title=body.route_title,
        route_description=body.route_description,
    )
    return CompleteResponse(
        completed_task=TaskResponse.from_result(result.completed_task),
        routed_task=(
            TaskResponse.from_result(result.routed_task) if result.routed_task else None
        ),
    )


@router.get("/tasks/{task_id}/handoff", response_model=list[HandoffHistoryItem])
async def handoff_history(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_handoff_history_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
):
    """Handoffs of the task, oldest first."""
    items = await assignment.handoff_history(tenant_id, task_id, current_user.viewer)
    return [HandoffHistoryItem.model_validate(h) for h in items]


@router.post("/tasks/{task_id}/handoff", response_model=TaskResponse)
@limit_writes
async def hand_off_task(
    request: Request,
    task_id: str,
    body: HandoffRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Offer the task to another member; it stays with the caller until accepted."""
    task = await assignment.hand_off(
        tenant_id,
        task_id,
        body.handoff_to,
        current_user.viewer,
        notes=body.handoff_notes,
        can_manage=await _can_manage(auth_svc, current_user, tenant_id),
    )
    return TaskResponse.from_result(task)


@router.delete("/tasks/{task_id}/handoff", response_model=TaskResponse)
@limit_writes
async def accept_handoff(
    request: Request,
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    assignment: Annotated[TaskAssignmentService, Depends(get_task_assignment_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "update"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Accept a pending handoff addressed to the caller (ownership moves now)."""
    task = await assignment.accept_handoff(tenant_id, task_id, current_user.viewer)
    return TaskResponse.from_result(task)
