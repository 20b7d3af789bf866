"""DTOs for subtasks."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SubtaskResult:
    id: str
    task_id: str
    title: str
    is_completed: bool
    completed_at: datetime | None
    completed_by: str | None
    position: int
    created_by: str | None
    created_at: datetime
