"""Users API: team directory, privacy settings and privacy-aware stats."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    ensure_audit_logged,
    get_team_query_service,
    get_team_service,
    get_tenant_id,
    require_permission,
)
from app.application.dtos.privacy import PrivacySettingsUpdate
from app.application.dtos.user import UserResult
from app.application.use_cases.users import TeamService
from app.core.limiter import limit_writes
from app.schemas.privacy import (
    PrivacySettingsResponse,
    PrivacySettingsUpdateRequest,
    UserStatsResponse,
)
from app.schemas.user import TeamMemberResponse

router = APIRouter()


@router.get("/team", response_model=list[TeamMemberResponse])
async def list_team(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    team_svc: Annotated[TeamService, Depends(get_team_query_service)],
    _: Annotated[object, Depends(require_permission("user", "read"))] = None,
):
    """Active members shown in the task pool, ordered by name."""
    members = await team_svc.team(tenant_id)
    return [TeamMemberResponse.model_validate(m) for m in members]


@router.get("/{user_id}/privacy", response_model=PrivacySettingsResponse)
async def get_privacy_settings(
    user_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    team_svc: Annotated[TeamService, Depends(get_team_query_service)],
    current_user: Annotated[UserResult, Depends(require_permission("user", "read"))],
):
    """Own settings, or anyone's for owners/admins. Defaults when never saved."""
    settings = await team_svc.get_privacy(tenant_id, user_id, current_user.viewer)
    return PrivacySettingsResponse.model_validate(settings)


@router.put("/{user_id}/privacy", response_model=PrivacySettingsResponse)
@limit_writes
async def update_privacy_settings(
    request: Request,
    user_id: str,
    body: PrivacySettingsUpdateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    team_svc: Annotated[TeamService, Depends(get_team_service)],
    current_user: Annotated[UserResult, Depends(require_permission("user", "read"))],
    _audit: Annotated[object, Depends(ensure_audit_logged)] = None,
):
    """Save the caller's own privacy settings (omitted fields are kept)."""
    update = PrivacySettingsUpdate(
        hide_tasks_from_peers=body.hide_tasks_from_peers,
        hide_activity_from_peers=body.hide_activity_from_peers,
        hide_performance_from_peers=body.hide_performance_from_peers,
        hide_calendar_from_peers=body.hide_calendar_from_peers,
        visible_to_user_ids=(
            tuple(body.visible_to_user_ids) if body.visible_to_user_ids is not None else None
        ),
    )
    settings = await team_svc.update_privacy(tenant_id, user_id, update, current_user.viewer)
    return PrivacySettingsResponse.model_validate(settings)


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    team_svc: Annotated[TeamService, Depends(get_team_query_service)],
    current_user: Annotated[UserResult, Depends(require_permission("user", "read"))],
):
    """Task numbers, or visible=false with null numbers when hidden from the caller."""
    stats = await team_svc.stats(tenant_id, user_id, current_user.viewer)
    return UserStatsResponse.model_validate(stats)
