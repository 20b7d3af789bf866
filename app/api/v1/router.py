"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    activity,
    audit_log,
    auth,
    feeds,
    health,
    subtasks,
    task_activity,
    taskpool,
    tasks,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(subtasks.router, prefix="/tasks", tags=["subtasks"])
api_router.include_router(task_activity.router, prefix="/tasks", tags=["task-activity"])
api_router.include_router(taskpool.router, prefix="/taskpool", tags=["taskpool"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(feeds.router, tags=["feeds"])
api_router.include_router(activity.router, prefix="/activity", tags=["activity"])
api_router.include_router(audit_log.router, prefix="/audit-log", tags=["audit-log"])
