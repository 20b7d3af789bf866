"""Shared helpers for audit logging: derive request metadata from Starlette Request."""

from __future__ import annotations

import logging

from starlette.requests import Request

from app.domain.enums import AuditCategory

logger = logging.getLogger(__name__)

# Path prefix to strip (e.g. /api/v1); the remainder names the resource
_API_PREFIX = "/api/v1"

# Namespaces whose second segment is the collection (/taskpool/tasks/{id})
_NAMESPACES = frozenset({"taskpool"})

# Trailing action segments: (segment, method) -> audit action
_SUB_ACTIONS: dict[tuple[str, str], str] = {
    ("claim", "POST"): "claim",
    ("claim", "DELETE"): "release",
    ("assign", "POST"): "assign",
    ("assign", "DELETE"): "unassign",
    ("complete", "POST"): "complete",
    ("status", "POST"): "status_change",
    ("handoff", "POST"): "handoff",
    ("handoff", "DELETE"): "accept_handoff",
    ("privacy", "PUT"): "privacy_update",
}

_CATEGORIES: dict[str, AuditCategory] = {
    "tasks": AuditCategory.TASK,
    "auth": AuditCategory.AUTHENTICATION,
    "users": AuditCategory.USER_MANAGEMENT,
}


def get_audit_request_context(request: Request) -> tuple[str | None, str | None, str | None]:
    """Return (request_id, ip_address, user_agent) for audit log entries.

    request_id from request state, IP from X-Forwarded-For (first hop) or
    request.client.host, user_agent from header.
    """
    request_id = getattr(request.state, "request_id", None)
    client_host = request.client.host if request.client else None
    forwarded = request.headers.get("X-Forwarded-For")
    ip_address = (
        (forwarded.split(",")[0].strip() if forwarded else None) or client_host
    )
    user_agent = request.headers.get("User-Agent")
    return (request_id, ip_address, user_agent)


def get_actor_for_audit(request: Request) -> tuple[str | None, str | None, str | None]:
    """Return (tenant_id, user_id, session_id) from header and JWT for audit. None if missing."""
    from app.core.config import get_settings
    from app.infrastructure.security.jwt import decode_access_token

    settings = get_settings()
    tenant_id = request.headers.get(settings.tenant_header_name)
    user_id = session_id = None
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        try:
            claims = decode_access_token(auth[7:].strip())
        except ValueError:
            logger.debug("Audit: bearer token could not be decoded")
        else:
            user_id = claims.user_id
            session_id = claims.session_id
            tenant_id = tenant_id or claims.tenant_id
    return (tenant_id, user_id, session_id)


def get_audit_resource_from_path(path: str) -> tuple[str, str | None, str | None]:
    """Infer (resource_type, resource_id, trailing segment) from path.

    /api/v1/tasks/abc -> (tasks, abc, None);
    /api/v1/taskpool/tasks/abc/claim -> (tasks, abc, claim).
    """
    if not path.startswith(_API_PREFIX + "/"):
        return ("", None, None)
    parts = [p for p in path[len(_API_PREFIX) :].split("/") if p]
    if parts and parts[0] in _NAMESPACES and len(parts) > 1:
        parts = parts[1:]
    if not parts:
        return ("", None, None)
    resource_type = parts[0]
    resource_id = parts[1] if len(parts) > 1 else None
    trailing = parts[-1] if len(parts) > 2 else None
    return (resource_type, resource_id, trailing)


def get_audit_action(method: str, trailing: str | None = None) -> str:
    """Map HTTP method (and a trailing action segment such as claim) to audit action."""
    if trailing and (trailing, method) in _SUB_ACTIONS:
        return _SUB_ACTIONS[(trailing, method)]
    return {
        "POST": "create",
        "PUT": "update",
        "PATCH": "update",
        "DELETE": "delete",
    }.get(method, method.lower())


def get_audit_category(resource_type: str) -> AuditCategory:
    return _CATEGORIES.get(resource_type, AuditCategory.API)
