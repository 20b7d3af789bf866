"""Feeds API: organisation feed of action items and the caller's inbox."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_task_feed_service, get_tenant_id, require_permission
from app.application.dtos.user import UserResult
from app.application.use_cases.feeds import ORG_FEED_LIMIT, TaskFeedService
from app.schemas.feed import InboxResponse, OrgFeedResponse
from app.schemas.task import TaskResponse

router = APIRouter()


@router.get("/org-feed", response_model=OrgFeedResponse)
async def org_feed(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    feed_svc: Annotated[TaskFeedService, Depends(get_task_feed_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
    limit: int = Query(ORG_FEED_LIMIT, ge=1, le=ORG_FEED_LIMIT),
):
    """Calls, emails and document intake turned into tasks, newest first."""
    items = await feed_svc.org_feed(tenant_id, current_user.viewer, limit=limit)
    return OrgFeedResponse(items=[TaskResponse.from_result(t) for t in items])


@router.get("/my-inbox", response_model=InboxResponse)
async def my_inbox(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    feed_svc: Annotated[TaskFeedService, Depends(get_task_feed_service)],
    current_user: Annotated[UserResult, Depends(require_permission("task", "read"))],
):
    """Open tasks the caller holds, plus handoffs waiting for the caller to accept."""
    inbox = await feed_svc.my_inbox(tenant_id, current_user.viewer)
    return InboxResponse(
        tasks=[TaskResponse.from_result(t) for t in inbox.tasks],
        pending_handoffs=[TaskResponse.from_result(t) for t in inbox.pending_handoffs],
    )
