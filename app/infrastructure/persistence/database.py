"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (app/infrastructure/persistence/
migrations). The engine and session factory are created lazily on first
use (get_db / get_db_transactional) so import does not trigger Settings
validation.

On PostgreSQL, get_db and get_db_transactional set app.current_tenant_id
from the tenant context (set by TenantContextMiddleware) so row-level
security policies restrict rows to the current tenant.
"""

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings
from app.core.tenant_context import (
    TENANT_ID_MAX_LENGTH,
    is_valid_tenant_id_format,
)
from app.core.tenant_context import get_tenant_id as get_current_tenant_id
from app.domain.exceptions import SqlNotConfiguredException

logger = logging.getLogger(__name__)

# Set by ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def ensure_engine() -> AsyncEngine:
    """Create engine and AsyncSessionLocal on first use and return the engine."""
    global engine, AsyncSessionLocal
    if engine is not None and AsyncSessionLocal is not None:
        return engine
    settings = get_settings()
    if not settings.database_url:
        raise SqlNotConfiguredException()

    kwargs: dict[str, Any] = {"echo": settings.database_echo, "pool_pre_ping": True}
    if settings.is_postgres:
        kwargs.update(
            pool_size=settings.db_pool_size or 20,
            max_overflow=settings.db_max_overflow or 30,
            pool_recycle=3600,
            connect_args={"command_timeout": settings.db_command_timeout or 60},
        )
    engine = create_async_engine(settings.database_url, **kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine


def reset_engine() -> None:
    """Forget the cached engine (tests that switch DATABASE_URL)."""
    global engine, AsyncSessionLocal
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _quote_set_value(value: str) -> str:
    """Escape a value for use in PostgreSQL SET (single-quoted literal)."""
    return value.replace("'", "''")


async def _set_tenant_context(session: AsyncSession) -> None:
    """Set app.current_tenant_id on the session for RLS (PostgreSQL only).

    SET LOCAL does not accept bound parameters, so the value is format
    checked and quoted before interpolation; invalid ids are skipped.
    """
    tenant_id = get_current_tenant_id()
    if not tenant_id or not get_settings().is_postgres:
        return
    if not is_valid_tenant_id_format(tenant_id):
        logger.warning(
            "Skipping SET LOCAL app.current_tenant_id: tenant_id failed format validation (length=%d, max=%d)",
            len(tenant_id),
            TENANT_ID_MAX_LENGTH,
        )
        return
    safe = _quote_set_value(tenant_id)
    await session.execute(text(f"SET LOCAL app.current_tenant_id = '{safe}'"))


def _session_factory() -> async_sessionmaker[AsyncSession]:
    ensure_engine()
    if AsyncSessionLocal is None:
        logger.error(
            "SQL database not configured: set DATABASE_URL "
            "(e.g. postgresql+asyncpg://<user>:<password>@<host>:5432/<db>), "
            "then run: alembic upgrade head"
        )
        raise SqlNotConfiguredException()
    return AsyncSessionLocal


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    factory = _session_factory()
    async with factory() as session:
        await _set_tenant_context(session)
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Every repository resolved for one request shares this session, so the
    task change, its activity row and the audit row commit together.
    """
    factory = _session_factory()
    async with factory() as session:
        async with session.begin():
            await _set_tenant_context(session)
            yield session
