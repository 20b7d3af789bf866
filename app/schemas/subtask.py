"""Subtask API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SubtaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)


class SubtaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    is_completed: bool | None = None


class SubtaskReorderRequest(BaseModel):
    subtask_ids: list[str] = Field(..., description="Every subtask id of the task, in the new order")


class SubtaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    title: str
    is_completed: bool
    completed_at: datetime | None
    completed_by: str | None
    position: int
    created_by: str | None
    created_at: datetime
