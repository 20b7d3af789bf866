"""Task repository integration tests: pool queries, claim races, handoffs and stats."""

from datetime import timedelta

import pytest

from app.application.dtos.task import TaskCreate, TaskListFilters
from app.domain.enums import TaskPriority, TaskStatus, TaskView
from app.domain.exceptions import ResourceNotFoundException, TaskConflictException
from app.infrastructure.persistence.repositories import (
    TaskHandoffRepository,
    TaskRepository,
)
from app.shared.utils.datetime import utc_now


@pytest.fixture
def repo(db_session) -> TaskRepository:
    return TaskRepository(db_session)


async def _create(repo: TaskRepository, firm, title: str = "Prepare 1040", **kwargs):
    return await repo.create_task(
        firm.tenant.id, TaskCreate(title=title, **kwargs), created_by=firm.owner.id
    )


class TestClaim:
    async def test_claim_takes_ownership_and_starts_work(self, repo, seeded_firm) -> None:
        task = await _create(repo, seeded_firm)
        claimed = await repo.claim(seeded_firm.tenant.id, task.id, seeded_firm.staff.id)
        assert claimed.assigned_to == seeded_firm.staff.id
        assert claimed.claimed_by == seeded_firm.staff.id
        assert claimed.claimed_at is not None
        assert claimed.status == TaskStatus.IN_PROGRESS

    async def test_claim_keeps_review_status(self, repo, seeded_firm) -> None:
        task = await _create(repo, seeded_firm, status=TaskStatus.REVIEW)
        claimed = await repo.claim(seeded_firm.tenant.id, task.id, seeded_firm.staff.id)
        assert claimed.status == TaskStatus.REVIEW

    async def test_second_claim_conflicts(self, repo, seeded_firm) -> None:
        task = await _create(repo, seeded_firm)
        await repo.claim(seeded_firm.tenant.id, task.id, seeded_firm.staff.id)
        with pytest.raises(TaskConflictException) as exc_info:
            await repo.claim(seeded_firm.tenant.id, task.id, seeded_firm.peer.id)
        assert exc_info.value.details["reason"] == "already_claimed"
        current = await repo.get_or_raise(seeded_firm.tenant.id, task.id)
        assert current.claimed_by == seeded_firm.staff.id

    async def test_assigned_task_cannot_be_claimed(self, repo, seeded_firm) -> None:
        task = await _create(repo, seeded_firm, assigned_to=seeded_firm.peer.id)
        with pytest.raises(TaskConflictException):
            await repo.claim(seeded_firm.tenant.id, task.id, seeded_firm.staff.id)

    async def test_missing_task_is_not_found(self, repo, seeded_firm) -> None:
        with pytest.raises(ResourceNotFoundException):
            await repo.claim(seeded_firm.tenant.id, "missing", seeded_firm.staff.id)

    async def test_other_tenant_task_is_not_found(self, repo, seeded_firm) -> None:
        task = await _create(repo, seeded_firm)
        with pytest.raises(ResourceNotFoundException):
            await repo.claim("other-tenant", task.id, seeded_firm.staff.id)


class TestReleaseAndAssign:
    async def test_release_returns_to_pool(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        await repo.claim(tid, task.id, seeded_firm.staff.id)
        await repo.start_handoff(tid, task.id, seeded_firm.staff.id, seeded_firm.peer.id, None)
        released = await repo.release(tid, task.id)
        assert released.is_unassigned
        assert released.handoff_to is None
        assert released.status == TaskStatus.OPEN

    async def test_assign_clears_other_claimant(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        await repo.claim(tid, task.id, seeded_firm.staff.id)
        assigned = await repo.assign(tid, task.id, seeded_firm.peer.id, seeded_firm.manager.id)
        assert assigned.assigned_to == seeded_firm.peer.id
        assert assigned.assigned_by == seeded_firm.manager.id
        assert assigned.claimed_by is None

    async def test_list_by_assignee_follows_ownership(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        staff, peer = seeded_firm.staff.id, seeded_firm.peer.id
        claimed = await _create(repo, seeded_firm, "claimed")
        handed = await _create(repo, seeded_firm, "assigned")
        await _create(repo, seeded_firm, "untouched")

        await repo.claim(tid, claimed.id, staff)
        await repo.assign(tid, handed.id, staff, seeded_firm.manager.id)
        assert {t.id for t in await repo.list_by_assignee(tid, staff)} == {claimed.id, handed.id}
        assert await repo.list_by_assignee(tid, peer) == []

        await repo.assign(tid, handed.id, peer, seeded_firm.manager.id)
        await repo.release(tid, claimed.id)
        assert await repo.list_by_assignee(tid, staff) == []
        assert [t.id for t in await repo.list_by_assignee(tid, peer)] == [handed.id]

    async def test_list_by_assignee_open_only(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        staff = seeded_firm.staff.id
        done = await _create(repo, seeded_firm, "done", assigned_to=staff)
        live = await _create(repo, seeded_firm, "live", assigned_to=staff)
        await repo.update_status(tid, done.id, TaskStatus.COMPLETED)
        open_items = await repo.list_by_assignee(tid, staff, open_only=True)
        assert [t.id for t in open_items] == [live.id]


class TestHandoff:
    async def test_accept_moves_ownership(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        await repo.claim(tid, task.id, seeded_firm.staff.id)
        pending = await repo.start_handoff(
            tid, task.id, seeded_firm.staff.id, seeded_firm.peer.id, "Client prefers email"
        )
        assert pending.assigned_to == seeded_firm.staff.id
        assert [t.id for t in await repo.list_pending_handoffs(tid, seeded_firm.peer.id)] == [
            task.id
        ]

        accepted = await repo.accept_handoff(tid, task.id, seeded_firm.peer.id)
        assert accepted.assigned_to == seeded_firm.peer.id
        assert accepted.assigned_by == seeded_firm.staff.id
        assert accepted.claimed_by is None
        assert accepted.handoff_to is None
        assert accepted.handoff_from == seeded_firm.staff.id

    async def test_accept_without_pending_handoff_conflicts(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        await repo.start_handoff(tid, task.id, seeded_firm.staff.id, seeded_firm.peer.id, None)
        with pytest.raises(TaskConflictException) as exc_info:
            await repo.accept_handoff(tid, task.id, seeded_firm.manager.id)
        assert exc_info.value.details["reason"] == "no_pending_handoff"

    async def test_history_oldest_first(self, db_session, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        handoffs = TaskHandoffRepository(db_session)
        await handoffs.record(tid, task.id, seeded_firm.staff.id, seeded_firm.peer.id, "first")
        await handoffs.record(tid, task.id, seeded_firm.peer.id, seeded_firm.staff.id, None)
        history = await handoffs.history(tid, task.id)
        assert [h.notes for h in history] == ["first", None]


class TestListing:
    async def test_unassigned_oldest_first(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        first = await _create(repo, seeded_firm, "first")
        held = await _create(repo, seeded_firm, "held", assigned_to=seeded_firm.staff.id)
        done = await _create(repo, seeded_firm, "done", status=TaskStatus.COMPLETED)
        last = await _create(repo, seeded_firm, "last")
        ids = [t.id for t in await repo.list_unassigned(tid)]
        assert ids == [first.id, done.id, last.id]
        assert held.id not in ids
        open_ids = [t.id for t in await repo.list_unassigned(tid, include_closed=False)]
        assert open_ids == [first.id, last.id]

    async def test_pool_view_counts_before_paging(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        for i in range(3):
            await _create(repo, seeded_firm, f"pool {i}")
        await _create(repo, seeded_firm, "pending", status=TaskStatus.PENDING)
        await _create(repo, seeded_firm, "review", status=TaskStatus.REVIEW)
        await _create(repo, seeded_firm, "mine", assigned_to=seeded_firm.staff.id)

        page = await repo.list(tid, TaskListFilters(view=TaskView.POOL), skip=1, limit=2)
        assert page.total == 4
        assert len(page.items) == 2
        assert all(t.is_unassigned for t in page.items)

    async def test_my_views(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        staff = seeded_firm.staff.id
        claimed = await _create(repo, seeded_firm, "claimed")
        await repo.claim(tid, claimed.id, staff)
        assigned = await _create(repo, seeded_firm, "assigned", assigned_to=staff)
        await _create(repo, seeded_firm, "finished", assigned_to=staff, status=TaskStatus.COMPLETED)

        mine = await repo.list(tid, TaskListFilters(view=TaskView.MY_ASSIGNED), user_id=staff)
        assert {t.id for t in mine.items} == {claimed.id, assigned.id}
        claimed_page = await repo.list(
            tid, TaskListFilters(view=TaskView.MY_CLAIMED), user_id=staff
        )
        assert [t.id for t in claimed_page.items] == [claimed.id]

    async def test_overdue_view(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        now = utc_now()
        late = await _create(repo, seeded_firm, "late", due_date=now - timedelta(days=1))
        await _create(repo, seeded_firm, "future", due_date=now + timedelta(days=1))
        await _create(
            repo,
            seeded_firm,
            "late but done",
            due_date=now - timedelta(days=1),
            status=TaskStatus.COMPLETED,
        )
        page = await repo.list(tid, TaskListFilters(view=TaskView.OVERDUE), now=now)
        assert [t.id for t in page.items] == [late.id]

    async def test_cancelled_past_due_stays_overdue(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        now = utc_now()
        dropped = await _create(repo, seeded_firm, "dropped", due_date=now - timedelta(days=3))
        _, cancelled = await repo.update_status(tid, dropped.id, TaskStatus.CANCELLED)
        assert cancelled.is_overdue(now)
        page = await repo.list(tid, TaskListFilters(view=TaskView.OVERDUE), now=now)
        assert [t.id for t in page.items] == [dropped.id]
        stats = await repo.pool_stats(tid, seeded_firm.staff.id, now=now)
        assert stats.overdue == 1

    async def test_search_and_visibility_filters(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        staff = seeded_firm.staff.id
        await _create(repo, seeded_firm, "Payroll 100% review")
        theirs = await _create(repo, seeded_firm, "Payroll filing", assigned_to=staff)

        found = await repo.list(tid, TaskListFilters(search="100%"))
        assert [t.title for t in found.items] == ["Payroll 100% review"]

        own = await repo.list(tid, TaskListFilters(visible_to_user_id=staff))
        assert [t.id for t in own.items] == [theirs.id]

    async def test_priority_filter(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        urgent = await _create(repo, seeded_firm, "urgent", priority=TaskPriority.URGENT)
        await _create(repo, seeded_firm, "normal")
        page = await repo.list(tid, TaskListFilters(priority=TaskPriority.URGENT))
        assert [t.id for t in page.items] == [urgent.id]


class TestStatusAndStats:
    async def test_completed_at_follows_status(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        change, done = await repo.update_status(tid, task.id, TaskStatus.COMPLETED)
        assert change.action.value == "completed"
        assert done.completed_at is not None
        _, reopened = await repo.update_status(tid, task.id, TaskStatus.IN_PROGRESS)
        assert reopened.completed_at is None

    async def test_pool_stats(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        prepare = seeded_firm.action_types["PREPARE"].id
        staff = seeded_firm.staff.id
        now = utc_now()
        await _create(repo, seeded_firm, "a", action_type_id=prepare, priority=TaskPriority.URGENT)
        await _create(repo, seeded_firm, "b", action_type_id=prepare)
        taken = await _create(repo, seeded_firm, "c", action_type_id=prepare)
        await repo.claim(tid, taken.id, staff)
        await _create(
            repo, seeded_firm, "d", priority=TaskPriority.HIGH, due_date=now - timedelta(hours=2)
        )
        finished = await _create(repo, seeded_firm, "e", priority=TaskPriority.URGENT)
        await repo.update_status(tid, finished.id, TaskStatus.COMPLETED)

        stats = await repo.pool_stats(tid, staff, now=now + timedelta(seconds=1))
        assert stats.open == 3
        assert stats.in_progress == 1
        assert stats.completed == 1
        assert stats.pool_available == 3
        assert stats.my_claimed == 1
        assert stats.overdue == 1
        assert stats.completed_today == 1
        assert stats.urgent == 1
        assert stats.high == 1
        assert stats.by_action_type["PREPARE"] == 2
        assert stats.by_action_type["REVIEW"] == 0
        assert list(stats.by_action_type)[0] == "RESPOND"

    async def test_assigned_open_task_is_not_pool_available(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        prepare = seeded_firm.action_types["PREPARE"].id
        await _create(
            repo, seeded_firm, "given out", action_type_id=prepare, assigned_to=seeded_firm.peer.id
        )
        pooled = await _create(repo, seeded_firm, "in pool", action_type_id=prepare)
        stats = await repo.pool_stats(tid, seeded_firm.staff.id)
        assert stats.open == 2
        assert stats.pool_available == 1
        assert stats.by_action_type["PREPARE"] == 1
        assert [t.id for t in await repo.list_unassigned(tid, include_closed=False)] == [pooled.id]

    async def test_user_counts_average_from_claim(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        staff = seeded_firm.staff.id
        start = utc_now() - timedelta(hours=3)
        for minutes in (30, 90):
            task = await _create(repo, seeded_firm)
            await repo.claim(tid, task.id, staff, now=start)
            await repo.update_status(
                tid, task.id, TaskStatus.COMPLETED, now=start + timedelta(minutes=minutes)
            )
        busy = await _create(repo, seeded_firm)
        await repo.claim(tid, busy.id, staff)

        counts = await repo.user_counts(tid, staff)
        assert counts.tasks_completed == 2
        assert counts.tasks_in_progress == 1
        assert counts.avg_completion_minutes == pytest.approx(60.0)

    async def test_user_counts_without_history(self, repo, seeded_firm) -> None:
        counts = await repo.user_counts(seeded_firm.tenant.id, seeded_firm.peer.id)
        assert counts.tasks_completed == 0
        assert counts.avg_completion_minutes is None

    async def test_delete_task(self, repo, seeded_firm) -> None:
        tid = seeded_firm.tenant.id
        task = await _create(repo, seeded_firm)
        await repo.delete_task(tid, task.id)
        assert await repo.get(tid, task.id) is None
        with pytest.raises(ResourceNotFoundException):
            await repo.delete_task(tid, task.id)
