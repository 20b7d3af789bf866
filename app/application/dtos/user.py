"""DTOs for users (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import UserRole


@dataclass(frozen=True)
class Viewer:
    """Identity a read path is filtered for: who is looking, with what role."""

    user_id: str
    role: UserRole

    @property
    def is_administrator(self) -> bool:
        return self.role.is_administrator


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, authenticate, team). No password."""

    id: str
    tenant_id: str
    email: str
    full_name: str | None
    role: UserRole
    is_active: bool
    show_in_taskpool: bool = True
    department: str | None = None
    job_title: str | None = None

    @property
    def display_name(self) -> str:
        """full_name, or the local part of the email when no name is set."""
        if self.full_name and self.full_name.strip():
            return self.full_name.strip()
        return self.email.split("@", 1)[0]

    @property
    def viewer(self) -> Viewer:
        return Viewer(user_id=self.id, role=self.role)
