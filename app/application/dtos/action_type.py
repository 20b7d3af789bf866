"""DTOs for task action types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActionTypeResult:
    id: str
    code: str
    label: str
    color: str
    icon: str | None
    sort_order: int
    is_active: bool


@dataclass(frozen=True)
class ActionTypeSeed:
    """Default action type created for every new tenant."""

    code: str
    label: str
    color: str
    icon: str
    sort_order: int


DEFAULT_ACTION_TYPES: tuple[ActionTypeSeed, ...] = (
    ActionTypeSeed("RESPOND", "Respond", "#3B82F6", "message-square", 1),
    ActionTypeSeed("PREPARE", "Prepare", "#8B5CF6", "file-text", 2),
    ActionTypeSeed("REVIEW", "Review", "#F59E0B", "eye", 3),
    ActionTypeSeed("REQUEST", "Request", "#10B981", "help-circle", 4),
    ActionTypeSeed("FILE", "File", "#EF4444", "send", 5),
    ActionTypeSeed("SCHEDULE", "Schedule", "#EC4899", "calendar", 6),
    ActionTypeSeed("PROCESS", "Process", "#6B7280", "settings", 7),
)
