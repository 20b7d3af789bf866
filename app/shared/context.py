"""Request context management using contextvars.

Async-safe storage for request-scoped actor data (user, login session,
client address), set once the request is authenticated and read by the
audit log writer.

Usage:
    set_current_user(user_id="user123", session_id="sid-1")
    user_id = get_current_actor_id()
"""

from contextvars import ContextVar
from dataclasses import dataclass

from app.shared.enums import ActorType

_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)
_current_session_id: ContextVar[str | None] = ContextVar(
    "current_session_id", default=None
)
_current_actor_type: ContextVar[ActorType] = ContextVar(
    "current_actor_type", default=ActorType.SYSTEM
)


@dataclass(frozen=True)
class ActorContext:
    """Immutable snapshot of the current actor context."""

    user_id: str | None
    actor_type: ActorType
    session_id: str | None = None


def set_current_user(
    user_id: str | None,
    session_id: str | None = None,
    actor_type: ActorType = ActorType.USER,
) -> None:
    """Set the current user context for this request.

    Raises:
        ValueError: If actor_type is USER and user_id is None or empty.
    """
    if actor_type == ActorType.USER and not user_id:
        raise ValueError("user_id is required when actor_type is USER")
    _current_user_id.set(user_id)
    _current_session_id.set(session_id)
    _current_actor_type.set(actor_type)


def clear_current_user() -> None:
    """Clear the current user context."""
    _current_user_id.set(None)
    _current_session_id.set(None)
    _current_actor_type.set(ActorType.SYSTEM)


def get_current_actor_id() -> str | None:
    """Return the current user ID, or None if not authenticated."""
    return _current_user_id.get()


def get_current_session_id() -> str | None:
    """Return the login session id (JWT sid claim) of the current user."""
    return _current_session_id.get()


def get_actor_context() -> ActorContext:
    """Return a snapshot of the current actor context."""
    return ActorContext(
        user_id=_current_user_id.get(),
        actor_type=_current_actor_type.get(),
        session_id=_current_session_id.get(),
    )
