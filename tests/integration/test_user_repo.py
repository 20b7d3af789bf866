"""User repository: authentication, batch lookups and the team directory."""

import pytest

from app.domain.enums import UserRole
from app.domain.exceptions import UserAlreadyExistsException
from app.infrastructure.persistence.models import User
from app.infrastructure.persistence.repositories import UserRepository


async def test_authenticate(db_session, seeded_firm) -> None:
    repo = UserRepository(db_session)
    tid = seeded_firm.tenant.id
    user = await repo.authenticate("  Staff@acme-cpa.example.com ", tid, seeded_firm.password)
    assert user is not None
    assert user.id == seeded_firm.staff.id
    assert await repo.authenticate(seeded_firm.staff.email, tid, "wrong") is None
    assert await repo.authenticate("nobody@example.com", tid, seeded_firm.password) is None
    assert await repo.authenticate(seeded_firm.staff.email, "other", seeded_firm.password) is None


async def test_inactive_user_cannot_authenticate(db_session, seeded_firm) -> None:
    repo = UserRepository(db_session)
    row = await db_session.get(User, seeded_firm.peer.id)
    row.is_active = False
    await db_session.flush()
    tid = seeded_firm.tenant.id
    assert await repo.authenticate(seeded_firm.peer.email, tid, seeded_firm.password) is None
    assert await repo.existing_ids(tid, {seeded_firm.peer.id, seeded_firm.staff.id}) == {
        seeded_firm.staff.id
    }
    assert seeded_firm.peer.id not in {u.id for u in await repo.list_team(tid)}


async def test_create_user_rejects_duplicate_email(db_session, seeded_firm) -> None:
    repo = UserRepository(db_session)
    tid = seeded_firm.tenant.id
    created = await repo.create_user(tid, "New.Hire@example.com", "s3cret-pass", full_name="Nia")
    assert created.email == "new.hire@example.com"
    assert created.role == UserRole.STAFF
    with pytest.raises(UserAlreadyExistsException):
        await repo.create_user(tid, "new.hire@example.com", "another-pass")


async def test_get_roles(db_session, seeded_firm) -> None:
    roles = await UserRepository(db_session).get_roles(
        seeded_firm.tenant.id, {seeded_firm.owner.id, seeded_firm.manager.id, "ghost"}
    )
    assert roles == {seeded_firm.owner.id: UserRole.OWNER, seeded_firm.manager.id: UserRole.MANAGER}


async def test_team_ordered_by_name(db_session, seeded_firm) -> None:
    team = await UserRepository(db_session).list_team(seeded_firm.tenant.id)
    assert [u.full_name for u in team] == ["Max Manager", "Olive Owner", "Pat Peer", "Sam Staff"]
