"""Task activity (timeline and comments) schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.application.dtos.task_activity import TaskActivityResult
from app.domain.enums import TaskActivityAction
from app.domain.value_objects.payloads import dump_payload


class CommentRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=5000)
    mentions: list[str] = Field(default_factory=list, max_length=50)


class TaskActivityResponse(BaseModel):
    id: str
    task_id: str
    user_id: str | None
    action: TaskActivityAction
    description: str | None
    old_value: str | None
    new_value: str | None
    details: dict[str, Any] | None
    created_at: datetime

    @classmethod
    def from_result(cls, entry: TaskActivityResult) -> "TaskActivityResponse":
        return cls(
            id=entry.id,
            task_id=entry.task_id,
            user_id=entry.user_id,
            action=entry.action,
            description=entry.description,
            old_value=entry.old_value,
            new_value=entry.new_value,
            details=dump_payload(entry.details) if entry.details is not None else None,
            created_at=entry.created_at,
        )
