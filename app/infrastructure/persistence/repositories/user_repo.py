"""User repository with password helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.domain.enums import UserRole
from app.domain.exceptions import UserAlreadyExistsException
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.security.password import get_password_hash, verify_password

# Lazy dummy hash for constant-time comparison when user is not found.
# Computed on first use in a thread to avoid blocking the event loop at import.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        tenant_id=u.tenant_id,
        email=u.email,
        full_name=u.full_name,
        role=UserRole(u.role),
        is_active=u.is_active,
        show_in_taskpool=u.show_in_taskpool,
        department=u.department,
        job_title=u.job_title,
    )


class UserRepository(BaseRepository[User]):
    """User repository: authenticate, create_user, team listing, role lookups."""

    resource_name = "user"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email_and_tenant(self, email: str, tenant_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(
                func.lower(User.email) == email.strip().lower(),
                User.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> UserResult | None:
        user = await self.get_for_tenant(tenant_id, user_id)
        return _user_to_result(user) if user else None

    async def authenticate(
        self, email: str, tenant_id: str, password: str
    ) -> UserResult | None:
        """Return the user when email/password match an active account, else None."""
        user = await self.get_by_email_and_tenant(email, tenant_id)
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not user.is_active:
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)

    async def create_user(
        self,
        tenant_id: str,
        email: str,
        password: str,
        *,
        full_name: str | None = None,
        role: UserRole = UserRole.STAFF,
        department: str | None = None,
        job_title: str | None = None,
    ) -> UserResult:
        """Create user; raise UserAlreadyExistsException on duplicate email."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = User(
            tenant_id=tenant_id,
            email=email.strip().lower(),
            full_name=full_name,
            hashed_password=hashed,
            role=role.value,
            is_active=True,
            department=department,
            job_title=job_title,
        )
        try:
            created = await self.create(user)
        except IntegrityError as e:
            raise UserAlreadyExistsException() from e
        return _user_to_result(created)

    async def get_roles(self, tenant_id: str, user_ids: set[str]) -> dict[str, UserRole]:
        """Return role per active user id (batch); unknown or inactive ids are omitted."""
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.role).where(
                User.tenant_id == tenant_id,
                User.id.in_(user_ids),
                User.is_active.is_(True),
            )
        )
        return {row.id: UserRole(row.role) for row in result}

    async def existing_ids(self, tenant_id: str, user_ids: set[str]) -> set[str]:
        """Return the subset of user_ids that are active users in tenant_id."""
        if not user_ids:
            return set()
        result = await self.db.execute(
            select(User.id).where(
                User.tenant_id == tenant_id,
                User.id.in_(user_ids),
                User.is_active.is_(True),
            )
        )
        return set(result.scalars().all())

    async def list_team(self, tenant_id: str) -> list[UserResult]:
        """Active users shown in the task pool, ordered by name (email when unnamed)."""
        result = await self.db.execute(
            select(User)
            .where(
                User.tenant_id == tenant_id,
                User.is_active.is_(True),
                User.show_in_taskpool.is_(True),
            )
            .order_by(func.coalesce(User.full_name, User.email), User.id)
        )
        return [_user_to_result(u) for u in result.scalars().all()]
