"""Application use cases: one entry point per workflow."""

from app.application.use_cases.feeds import TaskFeedService
from app.application.use_cases.tasks import (
    CompletionResult,
    SubtaskService,
    TaskActivityService,
    TaskAssignmentService,
    TaskService,
)
from app.application.use_cases.users import TeamService

__all__ = [
    "CompletionResult",
    "SubtaskService",
    "TaskActivityService",
    "TaskAssignmentService",
    "TaskFeedService",
    "TaskService",
    "TeamService",
]
