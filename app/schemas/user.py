"""User API schemas."""

from pydantic import BaseModel, ConfigDict

from app.domain.enums import UserRole


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    email: str
    full_name: str | None = None
    display_name: str
    role: UserRole
    is_active: bool
    department: str | None = None
    job_title: str | None = None


class TeamMemberResponse(BaseModel):
    """Member of the team list (task pool assignees)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str
    role: UserRole
    department: str | None = None
    job_title: str | None = None
