"""Shared enumerations for the PracticeDesk application.

Cross-cutting enums used by application and infrastructure (e.g. the
actor recorded in request context). Domain-specific enums (task status,
roles) live in app.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActorType(_ValuesMixin, str, Enum):
    """Who performed an action recorded in the audit log."""

    USER = "user"
    SYSTEM = "system"
