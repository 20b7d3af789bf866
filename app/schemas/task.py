"""Task API schemas (tasks, from-action, list pages)."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.task import TaskResult
from app.domain.enums import TaskPriority, TaskSourceType, TaskStatus
from app.domain.value_objects.payloads import dump_payload


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=20000)
    status: TaskStatus = TaskStatus.OPEN
    priority: TaskPriority = TaskPriority.MEDIUM
    source_type: TaskSourceType = TaskSourceType.MANUAL
    source_metadata: dict[str, Any] | None = None
    source_email_id: str | None = None
    action_type_id: str | None = None
    client_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    """Partial update (PATCH). Only fields present in the body are applied.

    assigned_to: null returns the task to the pool.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=20000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    action_type_id: str | None = None
    client_id: str | None = None
    assigned_to: str | None = None


class ActionItemRequest(BaseModel):
    """Action item from a call, email or document intake to turn into a task."""

    title: str = Field(..., min_length=1, max_length=500)
    action_item_type: str = Field(
        ..., min_length=1, max_length=64, description="e.g. callback, email, appointment"
    )
    source_type: TaskSourceType
    description: str | None = Field(default=None, max_length=20000)
    priority: TaskPriority = TaskPriority.MEDIUM
    source_metadata: dict[str, Any] | None = None
    source_email_id: str | None = None
    client_id: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None


class TaskResponse(BaseModel):
    id: str
    tenant_id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    source_type: TaskSourceType
    source_metadata: dict[str, Any] | None
    source_email_id: str | None
    action_type_id: str | None
    client_id: str | None
    assigned_to: str | None
    assigned_by: str | None
    assigned_at: datetime | None
    claimed_by: str | None
    claimed_at: datetime | None
    due_date: datetime | None
    completed_at: datetime | None
    created_by: str | None
    routed_from_task_id: str | None
    handoff_to: str | None
    handoff_from: str | None
    handoff_notes: str | None
    handoff_at: datetime | None
    created_at: datetime
    updated_at: datetime
    is_overdue: bool = Field(..., description="Derived: due date passed and not completed")

    @classmethod
    def from_result(cls, task: TaskResult) -> "TaskResponse":
        data = {f.name: getattr(task, f.name) for f in fields(task)}
        data["source_metadata"] = (
            dump_payload(task.source_metadata) if task.source_metadata is not None else None
        )
        data["is_overdue"] = task.is_overdue()
        return cls.model_validate(data)


class TaskListResponse(BaseModel):
    """Page of tasks. total counts matches before privacy filtering."""

    items: list[TaskResponse]
    total: int
    skip: int
    limit: int
