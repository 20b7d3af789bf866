"""Pytest configuration and fixtures for practicedesk.

Each test that asks for `database` gets a fresh SQLite file (aiosqlite) with
every table created from the ORM metadata. HTTP tests use app.main:app over
ASGITransport (lifespan does not run, so app.state.cache is None and
permission checks hit the database). All imports use app.*.
"""

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache

# Settings are validated on first use; point them at SQLite before app import.
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='practicedesk-')}/bootstrap.db"
)
os.environ.setdefault("SECRET_KEY", "practicedesk-test-signing-key")
os.environ["REDIS_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from app.application.dtos.action_type import ActionTypeResult  # noqa: E402
from app.application.dtos.task import TaskResult  # noqa: E402
from app.application.dtos.tenant import TenantResult  # noqa: E402
from app.application.dtos.user import UserResult  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.core.limiter import limiter  # noqa: E402
from app.domain.enums import TaskPriority, TaskSourceType, TaskStatus, UserRole  # noqa: E402
from app.infrastructure.persistence import database as db_mod  # noqa: E402
from app.infrastructure.persistence.models import Client, User  # noqa: E402
from app.infrastructure.persistence.repositories import (  # noqa: E402
    ActionTypeRepository,
    TenantRepository,
    UserRepository,
)
from app.infrastructure.security.jwt import create_access_token  # noqa: E402
from app.infrastructure.security.password import get_password_hash  # noqa: E402
from app.main import app  # noqa: E402

# Rate limits are keyed by client address; every test request comes from the same one.
limiter.enabled = False

TEST_PASSWORD = "correct-horse-battery"
TEST_SESSION_ID = "sess-test-0001"


@lru_cache
def _hashed_test_password() -> str:
    return get_password_hash(TEST_PASSWORD)


@dataclass
class Firm:
    """A seeded tenant: one member per role plus a second staff member (peer)."""

    tenant: TenantResult
    owner: UserResult
    manager: UserResult
    staff: UserResult
    peer: UserResult
    action_types: dict[str, ActionTypeResult]
    client_id: str
    password: str = TEST_PASSWORD

    def headers(self, user: UserResult, *, session_id: str = TEST_SESSION_ID) -> dict[str, str]:
        """Bearer token (sub, tenant_id, role, sid) plus the tenant header."""
        token = create_access_token(
            {
                "sub": user.id,
                "tenant_id": user.tenant_id,
                "role": user.role.value,
                "sid": session_id,
            }
        )
        return {"Authorization": f"Bearer {token}", "X-Tenant-ID": self.tenant.id}


async def _add_user(
    session: AsyncSession,
    tenant_id: str,
    email: str,
    role: UserRole,
    full_name: str | None = None,
) -> UserResult:
    user = User(
        tenant_id=tenant_id,
        email=email,
        full_name=full_name,
        hashed_password=_hashed_test_password(),
        role=role.value,
    )
    session.add(user)
    await session.flush()
    result = await UserRepository(session).get_by_id_and_tenant(user.id, tenant_id)
    assert result is not None
    return result


async def seed_firm(session: AsyncSession, code: str = "acme-cpa") -> Firm:
    """Create a tenant with owner, manager, two staff, default action types and a client."""
    tenant = await TenantRepository(session).create_tenant(code=code, name=f"Firm {code}")
    owner = await _add_user(session, tenant.id, f"owner@{code}.example.com", UserRole.OWNER, "Olive Owner")
    manager = await _add_user(
        session, tenant.id, f"manager@{code}.example.com", UserRole.MANAGER, "Max Manager"
    )
    staff = await _add_user(session, tenant.id, f"staff@{code}.example.com", UserRole.STAFF, "Sam Staff")
    peer = await _add_user(session, tenant.id, f"peer@{code}.example.com", UserRole.STAFF, "Pat Peer")
    action_types = await ActionTypeRepository(session).ensure_defaults(tenant.id)
    client = Client(tenant_id=tenant.id, name="Harbor Bakery")
    session.add(client)
    await session.flush()
    return Firm(
        tenant=tenant,
        owner=owner,
        manager=manager,
        staff=staff,
        peer=peer,
        action_types={a.code: a for a in action_types},
        client_id=client.id,
    )


@pytest.fixture
async def database(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Fresh SQLite database with all tables; yields the app's session factory."""
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{tmp_path / 'practicedesk.db'}"
    get_settings.cache_clear()
    db_mod.reset_engine()
    engine = db_mod.ensure_engine()
    async with engine.begin() as conn:
        await conn.run_sync(db_mod.Base.metadata.create_all)
    assert db_mod.AsyncSessionLocal is not None
    yield db_mod.AsyncSessionLocal
    await engine.dispose()
    db_mod.reset_engine()


@pytest.fixture
async def db_session(database) -> AsyncSession:
    """Session for repository/integration tests. Rolled back after the test."""
    async with database() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def firm(database) -> Firm:
    """Committed firm fixture, visible to every request the app makes."""
    async with database() as session:
        async with session.begin():
            return await seed_firm(session)


@pytest.fixture
async def client(database) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_headers(firm: Firm) -> dict[str, str]:
    """Headers for the firm owner (full permissions)."""
    return firm.headers(firm.owner)


@pytest.fixture
async def seeded_firm(db_session: AsyncSession) -> Firm:
    """Firm seeded on db_session (uncommitted; for repository tests)."""
    return await seed_firm(db_session)


def _task_result(**overrides) -> TaskResult:
    now = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    data = {
        "id": "task-1",
        "tenant_id": "t1",
        "title": "Prepare 1040",
        "description": None,
        "status": TaskStatus.OPEN,
        "priority": TaskPriority.MEDIUM,
        "source_type": TaskSourceType.MANUAL,
        "source_metadata": None,
        "source_email_id": None,
        "action_type_id": None,
        "client_id": None,
        "assigned_to": None,
        "assigned_by": None,
        "assigned_at": None,
        "claimed_by": None,
        "claimed_at": None,
        "due_date": None,
        "completed_at": None,
        "created_by": None,
        "routed_from_task_id": None,
        "handoff_to": None,
        "handoff_from": None,
        "handoff_notes": None,
        "handoff_at": None,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return TaskResult(**data)


@pytest.fixture
def make_task():
    """Factory for TaskResult DTOs (unit tests with mocked repositories)."""
    return _task_result
