"""Pydantic request/response schemas for the API."""

from app.schemas.audit_log import (
    ActivityRecordRequest,
    AuditLogEntryResponse,
    AuditLogListResponse,
)
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.feed import InboxResponse, OrgFeedResponse
from app.schemas.health import HealthResponse
from app.schemas.privacy import (
    PrivacySettingsResponse,
    PrivacySettingsUpdateRequest,
    UserStatsResponse,
)
from app.schemas.subtask import SubtaskCreateRequest, SubtaskResponse
from app.schemas.task import TaskCreateRequest, TaskResponse, TaskUpdate
from app.schemas.task_activity import CommentRequest, TaskActivityResponse
from app.schemas.taskpool import CompleteResponse, PoolStatsResponse
from app.schemas.user import TeamMemberResponse, UserResponse

__all__ = [
    "ActivityRecordRequest",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "CommentRequest",
    "CompleteResponse",
    "HealthResponse",
    "InboxResponse",
    "LoginRequest",
    "OrgFeedResponse",
    "PoolStatsResponse",
    "PrivacySettingsResponse",
    "PrivacySettingsUpdateRequest",
    "SubtaskCreateRequest",
    "SubtaskResponse",
    "TaskActivityResponse",
    "TaskCreateRequest",
    "TaskResponse",
    "TaskUpdate",
    "TeamMemberResponse",
    "TokenResponse",
    "UserResponse",
    "UserStatsResponse",
]
