"""Privacy settings repository: partial upserts and batch lookup."""

from app.application.dtos.privacy import PrivacySettingsUpdate
from app.infrastructure.persistence.repositories import PrivacySettingsRepository


async def test_upsert_creates_then_patches(db_session, seeded_firm) -> None:
    repo = PrivacySettingsRepository(db_session)
    tid = seeded_firm.tenant.id
    staff = seeded_firm.staff.id
    assert await repo.get(tid, staff) is None

    created = await repo.upsert(
        tid,
        staff,
        PrivacySettingsUpdate(hide_tasks_from_peers=True, visible_to_user_ids=(seeded_firm.peer.id,)),
    )
    assert created.hide_tasks_from_peers
    assert not created.hide_performance_from_peers
    assert created.visible_to_user_ids == (seeded_firm.peer.id,)

    patched = await repo.upsert(tid, staff, PrivacySettingsUpdate(hide_performance_from_peers=True))
    assert patched.hide_tasks_from_peers
    assert patched.hide_performance_from_peers
    assert patched.visible_to_user_ids == (seeded_firm.peer.id,)


async def test_get_for_users_omits_users_without_rows(db_session, seeded_firm) -> None:
    repo = PrivacySettingsRepository(db_session)
    tid = seeded_firm.tenant.id
    await repo.upsert(tid, seeded_firm.peer.id, PrivacySettingsUpdate(hide_activity_from_peers=True))
    rows = await repo.get_for_users(tid, {seeded_firm.peer.id, seeded_firm.staff.id, ""})
    assert set(rows) == {seeded_firm.peer.id}
    assert rows[seeded_firm.peer.id].hide_activity_from_peers
    assert await repo.get_for_users(tid, []) == {}


async def test_rows_are_tenant_scoped(db_session, seeded_firm) -> None:
    repo = PrivacySettingsRepository(db_session)
    await repo.upsert(
        seeded_firm.tenant.id, seeded_firm.staff.id, PrivacySettingsUpdate(hide_tasks_from_peers=True)
    )
    assert await repo.get("another-tenant", seeded_firm.staff.id) is None
