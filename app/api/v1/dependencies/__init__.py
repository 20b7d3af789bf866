"""FastAPI dependencies (composition root).

Routes import from here only; repositories and services are built from
infrastructure implementations in the submodules.
"""

from app.api.v1.dependencies.audit import (
    ensure_audit_logged,
    get_api_audit_log_service,
    get_audit_log_repo,
)
from app.api.v1.dependencies.tasks import (
    get_handoff_history_service,
    get_subtask_query_service,
    get_subtask_service,
    get_task_activity_query_service,
    get_task_activity_service,
    get_task_assignment_service,
    get_task_feed_service,
    get_task_query_service,
    get_task_service,
    get_team_query_service,
    get_team_service,
)
from app.api.v1.dependencies.tenant import get_tenant_id, get_tenant_repo
from app.api.v1.dependencies.user_rbac import (
    get_authorization_service,
    get_current_user,
    get_current_user_optional,
    get_user_repo,
    get_viewer,
    require_permission,
)

__all__ = [
    "ensure_audit_logged",
    "get_api_audit_log_service",
    "get_audit_log_repo",
    "get_authorization_service",
    "get_current_user",
    "get_current_user_optional",
    "get_handoff_history_service",
    "get_subtask_query_service",
    "get_subtask_service",
    "get_task_activity_query_service",
    "get_task_activity_service",
    "get_task_assignment_service",
    "get_task_feed_service",
    "get_task_query_service",
    "get_task_service",
    "get_team_query_service",
    "get_team_service",
    "get_tenant_id",
    "get_tenant_repo",
    "get_user_repo",
    "get_viewer",
    "require_permission",
]
