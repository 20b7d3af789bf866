"""Domain enumerations for the PracticeDesk application.

Enums represent fixed sets of domain values (task status, priority, roles).
"""

from enum import Enum


class _ValuesMixin:
    """Adds values() to str enums (e.g. for CHECK constraints and validation)."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task status. OPEN and PENDING are both "not started" states.

    CANCELLED is reachable by explicit action only, never from the board.
    """

    OPEN = "open"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def not_started(cls) -> frozenset["TaskStatus"]:
        return frozenset({cls.OPEN, cls.PENDING})

    @classmethod
    def active(cls) -> frozenset["TaskStatus"]:
        """Statuses counted as work in progress (pending, open, in_progress)."""
        return frozenset({cls.OPEN, cls.PENDING, cls.IN_PROGRESS})

    @classmethod
    def board_columns(cls) -> tuple["TaskStatus", ...]:
        """Columns a kanban drag-and-drop may move a task between."""
        return (cls.OPEN, cls.IN_PROGRESS, cls.REVIEW, cls.COMPLETED)


class TaskPriority(_ValuesMixin, str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskSourceType(_ValuesMixin, str, Enum):
    """Provenance of a task. ROUTED tasks are follow-ups created on completion."""

    MANUAL = "manual"
    PHONE_CALL = "phone_call"
    EMAIL = "email"
    DOCUMENT_INTAKE = "document_intake"
    ROUTED = "routed"

    @classmethod
    def action_item_sources(cls) -> frozenset["TaskSourceType"]:
        """Sources that turn inbound communication into action items."""
        return frozenset({cls.PHONE_CALL, cls.EMAIL, cls.DOCUMENT_INTAKE})


class UserRole(_ValuesMixin, str, Enum):
    """Firm member role. OWNER and ADMIN bypass peer privacy rules."""

    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"

    @property
    def is_administrator(self) -> bool:
        return self in (UserRole.OWNER, UserRole.ADMIN)


class PrivacyDataType(_ValuesMixin, str, Enum):
    """Kinds of per-user data a peer may be hidden from."""

    TASKS = "tasks"
    ACTIVITY = "activity"
    PERFORMANCE = "performance"
    CALENDAR = "calendar"


class TaskActivityAction(_ValuesMixin, str, Enum):
    """Action recorded on a task activity entry."""

    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    COMPLETED = "completed"
    REOPENED = "reopened"
    CANCELLED = "cancelled"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    CLAIMED = "claimed"
    RELEASED = "released"
    ROUTED = "routed"
    HANDED_OFF = "handed_off"
    HANDOFF_ACCEPTED = "handoff_accepted"
    SUBTASK_ADDED = "subtask_added"
    SUBTASK_COMPLETED = "subtask_completed"
    SUBTASK_UNCOMPLETED = "subtask_uncompleted"
    SUBTASK_DELETED = "subtask_deleted"
    COMMENT = "comment"


class TaskView(_ValuesMixin, str, Enum):
    """Named task list views."""

    POOL = "pool"
    MY_ASSIGNED = "my_assigned"
    MY_CLAIMED = "my_claimed"
    OVERDUE = "overdue"


class AuditCategory(_ValuesMixin, str, Enum):
    AUTHENTICATION = "authentication"
    CLIENT = "client"
    TASK = "task"
    USER_MANAGEMENT = "user_management"
    SETTINGS = "settings"
    SYSTEM = "system"
    SECURITY = "security"
    API = "api"


class AuditSeverity(_ValuesMixin, str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
