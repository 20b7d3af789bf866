"""Privacy settings and privacy-aware stats schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PrivacySettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    hide_tasks_from_peers: bool
    hide_activity_from_peers: bool
    hide_performance_from_peers: bool
    hide_calendar_from_peers: bool
    visible_to_user_ids: list[str]
    is_default: bool = Field(
        default=False, description="True when the user has never saved settings"
    )


class PrivacySettingsUpdateRequest(BaseModel):
    """Partial update: omitted fields keep their current value."""

    hide_tasks_from_peers: bool | None = None
    hide_activity_from_peers: bool | None = None
    hide_performance_from_peers: bool | None = None
    hide_calendar_from_peers: bool | None = None
    visible_to_user_ids: list[str] | None = Field(default=None, max_length=500)


class UserStatsResponse(BaseModel):
    """Numbers are null (not zero) when the user hides performance from the viewer."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    visible: bool
    tasks_completed: int | None = None
    tasks_in_progress: int | None = None
    avg_completion_minutes: float | None = None
