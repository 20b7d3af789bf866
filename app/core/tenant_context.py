"""Tenant context for the current request.

Middleware sets the current tenant_id in this context variable so that
get_db / get_db_transactional can run SET LOCAL app.current_tenant_id on
PostgreSQL sessions. Tenant IDs are format-checked before use in SET LOCAL
or header validation.
"""

import re
from contextvars import ContextVar

# CUID/UUID-style: alphanumeric, hyphen, underscore; max length for SET LOCAL safety.
TENANT_ID_MAX_LENGTH = 64
_TENANT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1," + str(TENANT_ID_MAX_LENGTH) + r"}$")

current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)


def set_tenant_id(tenant_id: str | None) -> None:
    """Set the current tenant ID for this context (e.g. request)."""
    current_tenant_id.set(tenant_id)


def get_tenant_id() -> str | None:
    """Return the current tenant ID if set."""
    return current_tenant_id.get()


def is_valid_tenant_id_format(value: str | None) -> bool:
    """Return True if value is safe for SET LOCAL and header validation."""
    if not value or len(value) > TENANT_ID_MAX_LENGTH:
        return False
    return bool(_TENANT_ID_RE.fullmatch(value))
