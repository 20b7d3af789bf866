"""Task pool API schemas: claim/assign/status/complete/handoff, stats and action types."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import TaskStatus
from app.schemas.task import TaskResponse


class AssignRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class StatusChangeRequest(BaseModel):
    status: TaskStatus
    from_board: bool = Field(
        default=False, description="Kanban drag-and-drop (board columns only)"
    )


class CompleteRequest(BaseModel):
    """Optional routing to a follow-up task of another action type."""

    route_to_action_type_id: str | None = None
    route_title: str | None = Field(default=None, max_length=500)
    route_description: str | None = Field(default=None, max_length=20000)


class CompleteResponse(BaseModel):
    completed_task: TaskResponse
    routed_task: TaskResponse | None = None


class HandoffRequest(BaseModel):
    handoff_to: str = Field(..., min_length=1)
    handoff_notes: str | None = Field(default=None, max_length=5000)


class HandoffHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    from_user_id: str | None
    to_user_id: str
    notes: str | None
    created_at: datetime


class PoolStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    open: int
    in_progress: int
    completed: int
    pool_available: int
    my_claimed: int
    overdue: int
    completed_today: int
    urgent: int
    high: int
    by_action_type: dict[str, int]


class ActionTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    label: str
    color: str
    icon: str | None = None
    sort_order: int
    is_active: bool
