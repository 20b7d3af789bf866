"""DTOs for per-user privacy settings and privacy-aware stats."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PrivacySettingsResult:
    """Privacy settings for one user. Defaults describe a user with no row."""

    user_id: str
    hide_tasks_from_peers: bool = False
    hide_activity_from_peers: bool = False
    hide_performance_from_peers: bool = False
    hide_calendar_from_peers: bool = False
    visible_to_user_ids: tuple[str, ...] = field(default_factory=tuple)
    is_default: bool = False


@dataclass(frozen=True)
class PrivacySettingsUpdate:
    """Partial update; None leaves a field unchanged."""

    hide_tasks_from_peers: bool | None = None
    hide_activity_from_peers: bool | None = None
    hide_performance_from_peers: bool | None = None
    hide_calendar_from_peers: bool | None = None
    visible_to_user_ids: tuple[str, ...] | None = None


@dataclass(frozen=True)
class UserStats:
    """Per-user numbers, or an explicit hidden result.

    Hidden (visible=False) has every number None; callers must render a
    masked state rather than zeros.
    """

    user_id: str
    visible: bool
    tasks_completed: int | None = None
    tasks_in_progress: int | None = None
    avg_completion_minutes: float | None = None

    @classmethod
    def hidden(cls, user_id: str) -> "UserStats":
        return cls(user_id=user_id, visible=False)
