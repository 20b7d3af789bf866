"""Auth API: login and current user.

Login resolves the firm by tenant_code, checks email/password and returns a
JWT carrying sub, tenant_id, role and a fresh login session id (sid). Every
audit row written with that token records the sid.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dependencies import get_current_user
from app.application.dtos.user import UserResult
from app.core.config import get_settings
from app.core.limiter import limit_auth
from app.domain.enums import AuditCategory, AuditSeverity, TenantStatus
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.repositories import TenantRepository, UserRepository
from app.infrastructure.security.jwt import create_access_token
from app.infrastructure.services import ApiAuditLogService
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserResponse
from app.shared.request_audit import get_audit_request_context
from app.shared.utils.generators import generate_session_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
):
    """Authenticate with tenant_code, email and password; return JWT.

    Successful logins are written to the audit log (category authentication)
    in the same transaction.
    """
    tenant = await TenantRepository(db).get_by_code(body.tenant_code)
    if tenant is None or tenant.status != TenantStatus.ACTIVE:
        raise HTTPException(status_code=401, detail="Invalid tenant or credentials")

    user = await UserRepository(db).authenticate(
        email=body.email, tenant_id=tenant.id, password=body.password
    )
    if user is None:
        logger.info("Failed login for tenant %s", tenant.code)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    settings = get_settings()
    session_id = generate_session_id()
    token = create_access_token(
        data={
            "sub": user.id,
            "tenant_id": user.tenant_id,
            "role": user.role.value,
            "sid": session_id,
        },
    )
    request_id, ip_address, user_agent = get_audit_request_context(request)
    await ApiAuditLogService(db).log_action(
        tenant_id=user.tenant_id,
        user_id=user.id,
        action="login",
        resource_type="auth",
        resource_id=user.id,
        category=AuditCategory.AUTHENTICATION,
        severity=AuditSeverity.INFO,
        session_id=session_id,
        description=f"{user.display_name} signed in",
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
    )
    logger.info("User %s signed in (session=%s)", user.id, session_id)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
):
    """Return the currently authenticated user from JWT.

    Requires Authorization: Bearer <token>.
    """
    return UserResponse.model_validate(current_user)
