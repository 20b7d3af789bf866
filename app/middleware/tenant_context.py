"""Tenant context middleware.

Sets the current tenant ID in context from X-Tenant-ID (or the bearer
token's tenant_id claim) so database sessions can run SET LOCAL
app.current_tenant_id and log records carry the tenant. The actor context
is reset for every request; get_current_user fills it in.
Uses raw ASGI (no BaseHTTPMiddleware) so contextvars reach the route.
"""

from __future__ import annotations

from typing import Callable

from app.core.tenant_context import set_tenant_id
from app.infrastructure.security.jwt import decode_access_token
from app.shared.context import clear_current_user


def _get_header(scope: dict, name: str) -> str | None:
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def _tenant_id_from_scope(scope: dict, header_name: str) -> str | None:
    """Return tenant_id from the tenant header, else from a valid bearer token."""
    tenant_id = _get_header(scope, header_name)
    if tenant_id:
        return tenant_id
    auth = _get_header(scope, "authorization")
    if auth and auth.startswith("Bearer "):
        try:
            return decode_access_token(auth[7:].strip()).tenant_id
        except ValueError:
            return None
    return None


def TenantContextMiddleware(app: Callable, header_name: str = "X-Tenant-ID") -> Callable:
    """Set tenant context from header or JWT before the route runs. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        set_tenant_id(_tenant_id_from_scope(scope, header_name))
        clear_current_user()
        try:
            await app(scope, receive, send)
        finally:
            set_tenant_id(None)
            clear_current_user()

    return asgi_app
