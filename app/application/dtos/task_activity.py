"""DTOs for task activity entries (append-only)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import TaskActivityAction
from app.domain.value_objects.payloads import ActivityDetails


@dataclass(frozen=True)
class TaskActivityCreate:
    """Input for appending one activity row."""

    task_id: str
    user_id: str | None
    action: TaskActivityAction
    description: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    details: ActivityDetails | None = None


@dataclass(frozen=True)
class TaskActivityResult:
    id: str
    tenant_id: str
    task_id: str
    user_id: str | None
    action: TaskActivityAction
    description: str | None
    old_value: str | None
    new_value: str | None
    details: ActivityDetails | None
    created_at: datetime
