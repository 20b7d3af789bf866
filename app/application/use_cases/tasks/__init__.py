"""Task use cases: task CRUD, assignment state machine, subtasks, activity."""

from app.application.use_cases.tasks.subtask_operations import SubtaskService
from app.application.use_cases.tasks.task_activity_operations import TaskActivityService
from app.application.use_cases.tasks.task_assignment import (
    CompletionResult,
    TaskAssignmentService,
)
from app.application.use_cases.tasks.task_operations import TaskService

__all__ = [
    "CompletionResult",
    "SubtaskService",
    "TaskActivityService",
    "TaskAssignmentService",
    "TaskService",
]
