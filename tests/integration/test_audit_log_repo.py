"""Audit log repository: append, filters, counts and per-session history."""

import pytest

from app.application.dtos.audit_log import AuditLogEntryCreate, AuditLogFilters
from app.domain.enums import AuditCategory, AuditSeverity
from app.infrastructure.persistence.repositories import AuditLogRepository


@pytest.fixture
async def logged(db_session, seeded_firm) -> AuditLogRepository:
    repo = AuditLogRepository(db_session)
    tid = seeded_firm.tenant.id
    rows = [
        ("login", "auth", AuditCategory.AUTHENTICATION, "sess-a", None),
        ("claim", "tasks", AuditCategory.TASK, "sess-a", "task-1"),
        ("update", "tasks", AuditCategory.TASK, "sess-b", "task-2"),
        ("privacy_update", "users", AuditCategory.USER_MANAGEMENT, "sess-a", None),
    ]
    for action, resource, category, sid, resource_id in rows:
        await repo.create(
            AuditLogEntryCreate(
                tenant_id=tid,
                user_id=seeded_firm.staff.id,
                action=action,
                resource_type=resource,
                resource_id=resource_id,
                category=category,
                session_id=sid,
                description=f"{action} {resource}",
            )
        )
    await repo.create(
        AuditLogEntryCreate(
            tenant_id=tid,
            user_id=None,
            action="login",
            resource_type="auth",
            category=AuditCategory.AUTHENTICATION,
            severity=AuditSeverity.WARNING,
            success=False,
            error_message="Invalid credentials",
        )
    )
    return repo


async def test_recent_newest_first(logged, seeded_firm) -> None:
    recent = await logged.get_recent_logs(seeded_firm.tenant.id, n=2)
    assert len(recent) == 2
    assert recent[0].action == "login"
    assert recent[0].success is False
    assert recent[1].action == "privacy_update"


async def test_session_logs_chronological(logged, seeded_firm) -> None:
    entries = await logged.get_session_logs(seeded_firm.tenant.id, "sess-a")
    assert [e.action for e in entries] == ["login", "claim", "privacy_update"]
    assert await logged.get_session_logs(seeded_firm.tenant.id, "sess-none") == []


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        (AuditLogFilters(resource_type="tasks"), 2),
        (AuditLogFilters(category=AuditCategory.AUTHENTICATION), 2),
        (AuditLogFilters(severity=AuditSeverity.WARNING), 1),
        (AuditLogFilters(action="claim"), 1),
        (AuditLogFilters(search="privacy"), 1),
        (AuditLogFilters(), 5),
    ],
)
async def test_filters_and_count(logged, seeded_firm, filters, expected: int) -> None:
    tid = seeded_firm.tenant.id
    assert await logged.count(tid, filters) == expected
    assert len(await logged.list(tid, filters)) == expected


async def test_other_tenant_sees_nothing(logged) -> None:
    assert await logged.count("another-tenant") == 0
