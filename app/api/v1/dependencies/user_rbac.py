"""User, RBAC (role permissions), and auth dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult, Viewer
from app.application.services.authorization_service import AuthorizationService
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.jwt import decode_access_token
from app.infrastructure.services import PermissionResolver
from app.shared.context import set_current_user

from . import tenant

_http_bearer = HTTPBearer(auto_error=False)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for read operations."""
    return UserRepository(db)


async def get_authorization_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationService:
    """Build AuthorizationService with permission resolver and optional cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise cache is None and permission checks hit the DB only.
    """
    return AuthorizationService(
        permission_resolver=PermissionResolver(db),
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=get_settings().cache_ttl_permissions,
    )


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present; else None. Use for optional auth routes.

    Sets the actor context (user id, login session) for logging and audit.
    """
    if not credentials:
        return None
    try:
        claims = decode_access_token(credentials.credentials)
    except ValueError:
        return None
    user = await user_repo.get_by_id_and_tenant(claims.user_id, claims.tenant_id)
    if user is None or not user.is_active:
        return None
    set_current_user(user.id, session_id=claims.session_id)
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_permission(resource: str, action: str):
    """Dependency factory: require JWT auth and that the user has resource:action."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        tenant_id: Annotated[str, Depends(tenant.get_tenant_id)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        if current_user.tenant_id != tenant_id:
            raise HTTPException(status_code=403, detail="Forbidden")
        await auth_svc.require_permission(current_user.id, tenant_id, resource, action)
        return current_user

    return _require


async def get_viewer(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    tenant_id: Annotated[str, Depends(tenant.get_tenant_id)],
) -> Viewer:
    """Identity that read paths are filtered for (same tenant as the header)."""
    if current_user.tenant_id != tenant_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return current_user.viewer
