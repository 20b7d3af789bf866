"""TaskAssignmentService unit tests with mocked repositories."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.action_type import ActionTypeResult
from app.application.dtos.user import Viewer
from app.application.use_cases.tasks import TaskAssignmentService
from app.domain.entities.task import StatusChange
from app.domain.enums import TaskActivityAction, TaskSourceType, TaskStatus, UserRole
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TaskConflictException,
    ValidationException,
)

NOW = datetime(2025, 4, 1, 9, 30, 0, tzinfo=timezone.utc)
SAM = Viewer(user_id="sam", role=UserRole.STAFF)
PAT = Viewer(user_id="pat", role=UserRole.STAFF)
MAX = Viewer(user_id="max", role=UserRole.MANAGER)


@pytest.fixture
def mocks():
    task_repo = AsyncMock()
    activity = AsyncMock()
    user_repo = AsyncMock()
    user_repo.existing_ids = AsyncMock(side_effect=lambda tenant_id, ids: set(ids))
    handoff_repo = AsyncMock()
    action_type_repo = AsyncMock()
    svc = TaskAssignmentService(
        task_repo=task_repo,
        activity=activity,
        user_repo=user_repo,
        handoff_repo=handoff_repo,
        action_type_repo=action_type_repo,
    )
    return svc, task_repo, activity, user_repo, handoff_repo, action_type_repo


def _recorded_actions(activity: AsyncMock) -> list[TaskActivityAction]:
    return [c.args[3] for c in activity.record.await_args_list]


# ---- claim / release ----


async def test_claim_records_claimed_activity(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.claim = AsyncMock(
        return_value=make_task(assigned_to="sam", claimed_by="sam", status=TaskStatus.IN_PROGRESS)
    )
    task = await svc.claim("t1", "task-1", SAM)
    assert task.claimed_by == "sam"
    task_repo.claim.assert_awaited_once_with("t1", "task-1", "sam")
    assert _recorded_actions(activity) == [TaskActivityAction.CLAIMED]


async def test_claim_conflict_propagates_without_activity(mocks) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.claim = AsyncMock(side_effect=TaskConflictException("task-1", "already_claimed"))
    with pytest.raises(TaskConflictException):
        await svc.claim("t1", "task-1", SAM)
    activity.record.assert_not_awaited()


async def test_release_by_holder_is_released(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam", claimed_by="sam"))
    task_repo.release = AsyncMock(return_value=make_task())
    await svc.release("t1", "task-1", SAM)
    task_repo.release.assert_awaited_once_with("t1", "task-1")
    call = activity.record.await_args
    assert call.args[3] == TaskActivityAction.RELEASED
    assert call.kwargs["old_value"] == "sam"


async def test_release_by_other_member_is_denied(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam", claimed_by="sam"))
    with pytest.raises(AuthorizationException):
        await svc.release("t1", "task-1", PAT)
    task_repo.release.assert_not_awaited()


async def test_release_by_pool_manager_is_unassigned(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam"))
    task_repo.release = AsyncMock(return_value=make_task())
    await svc.release("t1", "task-1", MAX, can_manage=True)
    assert _recorded_actions(activity) == [TaskActivityAction.UNASSIGNED]


async def test_release_unheld_task_conflicts(mocks, make_task) -> None:
    svc, task_repo, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task())
    with pytest.raises(TaskConflictException) as exc_info:
        await svc.release("t1", "task-1", MAX, can_manage=True)
    assert exc_info.value.details["reason"] == "not_held"


# ---- assign ----


async def test_assign_unknown_user_is_rejected(mocks) -> None:
    svc, task_repo, _, user_repo, *_ = mocks
    user_repo.existing_ids = AsyncMock(return_value=set())
    with pytest.raises(ValidationException) as exc_info:
        await svc.assign("t1", "task-1", "ghost", MAX)
    assert exc_info.value.details == {"field": "assigned_to"}
    task_repo.assign.assert_not_awaited()


async def test_assign_to_current_assignee_is_a_noop(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam"))
    await svc.assign("t1", "task-1", "sam", MAX)
    task_repo.assign.assert_not_awaited()
    activity.record.assert_not_awaited()


async def test_assign_records_previous_assignee(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam"))
    task_repo.assign = AsyncMock(return_value=make_task(assigned_to="pat", assigned_by="max"))
    await svc.assign("t1", "task-1", "pat", MAX)
    task_repo.assign.assert_awaited_once_with("t1", "task-1", "pat", "max")
    call = activity.record.await_args
    assert call.args[3] == TaskActivityAction.ASSIGNED
    assert call.kwargs["old_value"] == "sam"
    assert call.kwargs["new_value"] == "pat"
    assert call.kwargs["details"].assigned_by == "max"


# ---- status ----


async def test_board_move_rejects_cancelled(mocks) -> None:
    svc, task_repo, *_ = mocks
    with pytest.raises(ValidationException):
        await svc.change_status("t1", "task-1", TaskStatus.CANCELLED, SAM, from_board=True)
    task_repo.update_status.assert_not_awaited()


async def test_status_noop_is_not_logged(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    change = StatusChange(TaskStatus.OPEN, TaskStatus.OPEN, None, TaskActivityAction.STATUS_CHANGED)
    task_repo.update_status = AsyncMock(return_value=(change, make_task()))
    await svc.change_status("t1", "task-1", TaskStatus.OPEN, SAM, from_board=True)
    activity.record.assert_not_awaited()


async def test_status_change_logs_old_and_new(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    change = StatusChange(
        TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, None, TaskActivityAction.STATUS_CHANGED
    )
    task_repo.update_status = AsyncMock(return_value=(change, make_task(status=TaskStatus.REVIEW)))
    await svc.change_status("t1", "task-1", TaskStatus.REVIEW, SAM)
    call = activity.record.await_args
    assert call.args[3] == TaskActivityAction.STATUS_CHANGED
    assert (call.kwargs["old_value"], call.kwargs["new_value"]) == ("in_progress", "review")


# ---- complete / route ----


async def test_complete_with_routing_creates_follow_up(mocks, make_task) -> None:
    svc, task_repo, activity, _, _, action_type_repo = mocks
    action_type_repo.get_result = AsyncMock(
        return_value=ActionTypeResult("at-file", "FILE", "File", "#EF4444", "send", 5, True)
    )
    completed = make_task(
        status=TaskStatus.COMPLETED, completed_at=NOW, client_id="c1", due_date=NOW
    )
    change = StatusChange(
        TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, NOW, TaskActivityAction.COMPLETED
    )
    task_repo.update_status = AsyncMock(return_value=(change, completed))
    task_repo.create_task = AsyncMock(
        return_value=make_task(id="task-2", source_type=TaskSourceType.ROUTED)
    )

    result = await svc.complete("t1", "task-1", SAM, route_to_action_type_id="at-file")

    assert result.completed_task is completed
    assert result.routed_task.id == "task-2"
    data = task_repo.create_task.await_args.args[1]
    assert data.title == "Follow-up: Prepare 1040"
    assert data.source_type == TaskSourceType.ROUTED
    assert data.routed_from_task_id == "task-1"
    assert data.client_id == "c1"
    assert data.due_date == NOW
    assert data.status == TaskStatus.OPEN
    assert _recorded_actions(activity) == [
        TaskActivityAction.COMPLETED,
        TaskActivityAction.ROUTED,
        TaskActivityAction.CREATED,
    ]


async def test_complete_with_unknown_route_target_changes_nothing(mocks) -> None:
    svc, task_repo, activity, _, _, action_type_repo = mocks
    action_type_repo.get_result = AsyncMock(return_value=None)
    with pytest.raises(ValidationException):
        await svc.complete("t1", "task-1", SAM, route_to_action_type_id="nope")
    task_repo.update_status.assert_not_awaited()
    activity.record.assert_not_awaited()


async def test_complete_without_routing(mocks, make_task) -> None:
    svc, task_repo, *_ = mocks
    change = StatusChange(TaskStatus.OPEN, TaskStatus.COMPLETED, NOW, TaskActivityAction.COMPLETED)
    task_repo.update_status = AsyncMock(
        return_value=(change, make_task(status=TaskStatus.COMPLETED, completed_at=NOW))
    )
    result = await svc.complete("t1", "task-1", SAM)
    assert result.routed_task is None
    task_repo.create_task.assert_not_awaited()


# ---- handoff ----


async def test_hand_off_to_self_is_rejected(mocks) -> None:
    svc, *_ = mocks
    with pytest.raises(ValidationException):
        await svc.hand_off("t1", "task-1", "sam", SAM)


@pytest.mark.parametrize("status", [TaskStatus.COMPLETED, TaskStatus.CANCELLED])
async def test_hand_off_closed_task_conflicts(mocks, make_task, status: TaskStatus) -> None:
    svc, task_repo, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(status=status, assigned_to="sam"))
    with pytest.raises(TaskConflictException) as exc_info:
        await svc.hand_off("t1", "task-1", "pat", SAM)
    assert exc_info.value.details["reason"] == "not_open"


async def test_hand_off_by_non_holder_is_denied(mocks, make_task) -> None:
    svc, task_repo, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="max"))
    with pytest.raises(AuthorizationException):
        await svc.hand_off("t1", "task-1", "pat", SAM)


async def test_hand_off_records_pending_handoff(mocks, make_task) -> None:
    svc, task_repo, activity, _, handoff_repo, _ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam"))
    task_repo.start_handoff = AsyncMock(
        return_value=make_task(assigned_to="sam", handoff_to="pat", handoff_from="sam")
    )
    task = await svc.hand_off("t1", "task-1", "pat", SAM, notes="<b>Client</b> prefers email")
    assert task.assigned_to == "sam"
    task_repo.start_handoff.assert_awaited_once_with(
        "t1", "task-1", "sam", "pat", "Client prefers email"
    )
    handoff_repo.record.assert_awaited_once_with(
        "t1", "task-1", "sam", "pat", "Client prefers email"
    )
    assert _recorded_actions(activity) == [TaskActivityAction.HANDED_OFF]


async def test_accept_handoff_logs_previous_holder(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(
        return_value=make_task(assigned_to="sam", handoff_to="pat", handoff_from="sam")
    )
    task_repo.accept_handoff = AsyncMock(return_value=make_task(assigned_to="pat"))
    task = await svc.accept_handoff("t1", "task-1", PAT)
    assert task.assigned_to == "pat"
    call = activity.record.await_args
    assert call.args[3] == TaskActivityAction.HANDOFF_ACCEPTED
    assert call.kwargs["old_value"] == "sam"
    assert call.kwargs["details"].from_user_id == "sam"


async def test_accept_handoff_not_addressed_to_caller(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(handoff_to="pat"))
    task_repo.accept_handoff = AsyncMock(
        side_effect=TaskConflictException("task-1", "no_pending_handoff")
    )
    with pytest.raises(TaskConflictException):
        await svc.accept_handoff("t1", "task-1", SAM)
    activity.record.assert_not_awaited()


# ---- privacy ----


async def test_hidden_task_is_not_found_before_any_change(mocks, make_task) -> None:
    svc, task_repo, activity, *_ = mocks
    task_repo.get_or_raise = AsyncMock(return_value=make_task(assigned_to="sam"))
    privacy = AsyncMock()
    privacy.ensure_task_visible = AsyncMock(side_effect=ResourceNotFoundException("task", "task-1"))
    svc.privacy_filter = privacy

    with pytest.raises(ResourceNotFoundException):
        await svc.change_status("t1", "task-1", TaskStatus.REVIEW, PAT)
    with pytest.raises(ResourceNotFoundException):
        await svc.complete("t1", "task-1", PAT)
    with pytest.raises(ResourceNotFoundException):
        await svc.hand_off("t1", "task-1", "max", PAT)
    with pytest.raises(ResourceNotFoundException):
        await svc.assign("t1", "task-1", "pat", MAX)
    with pytest.raises(ResourceNotFoundException):
        await svc.handoff_history("t1", "task-1", PAT)

    task_repo.update_status.assert_not_awaited()
    task_repo.start_handoff.assert_not_awaited()
    task_repo.assign.assert_not_awaited()
    activity.record.assert_not_awaited()
