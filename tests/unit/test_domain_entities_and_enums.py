"""Tests for domain entities (TaskEntity status machine, overdue) and enums."""

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities.task import TaskEntity
from app.domain.enums import (
    TaskActivityAction,
    TaskSourceType,
    TaskStatus,
    TenantStatus,
    UserRole,
)
from app.domain.exceptions import ValidationException

NOW = datetime(2025, 3, 14, 15, 0, 0, tzinfo=timezone.utc)


def _task(**overrides) -> TaskEntity:
    data = {"id": "t1", "tenant_id": "tn1", "title": "Prepare 1040", "status": TaskStatus.OPEN}
    data.update(overrides)
    return TaskEntity(**data)


class TestEnums:
    def test_tenant_status_values(self) -> None:
        assert TenantStatus.values() == ["active", "suspended", "archived"]

    def test_not_started_and_active_sets(self) -> None:
        assert TaskStatus.not_started() == {TaskStatus.OPEN, TaskStatus.PENDING}
        assert TaskStatus.IN_PROGRESS in TaskStatus.active()
        assert TaskStatus.REVIEW not in TaskStatus.active()

    def test_board_columns_exclude_cancelled_and_pending(self) -> None:
        columns = TaskStatus.board_columns()
        assert TaskStatus.CANCELLED not in columns
        assert TaskStatus.PENDING not in columns
        assert columns[0] == TaskStatus.OPEN

    def test_action_item_sources(self) -> None:
        assert TaskSourceType.action_item_sources() == {
            TaskSourceType.PHONE_CALL,
            TaskSourceType.EMAIL,
            TaskSourceType.DOCUMENT_INTAKE,
        }

    def test_administrator_roles(self) -> None:
        assert UserRole.OWNER.is_administrator
        assert UserRole.ADMIN.is_administrator
        assert not UserRole.MANAGER.is_administrator
        assert not UserRole.STAFF.is_administrator


class TestTaskEntityValidation:
    def test_requires_title(self) -> None:
        with pytest.raises(ValidationException, match="title"):
            _task(title="   ")

    def test_requires_tenant(self) -> None:
        with pytest.raises(ValidationException, match="tenant"):
            _task(tenant_id="")

    def test_pool_membership(self) -> None:
        assert _task().is_unassigned
        held = _task(claimed_by="u1")
        assert not held.is_unassigned
        assert held.is_held_by("u1")
        assert not held.is_held_by("u2")


class TestOverdue:
    def test_past_due_and_open_is_overdue(self) -> None:
        assert _task(due_date=NOW - timedelta(hours=1)).is_overdue(NOW)

    def test_completed_is_never_overdue(self) -> None:
        task = _task(status=TaskStatus.COMPLETED, due_date=NOW - timedelta(days=3), completed_at=NOW)
        assert not task.is_overdue(NOW)

    def test_cancelled_past_due_is_overdue(self) -> None:
        assert _task(status=TaskStatus.CANCELLED, due_date=NOW - timedelta(days=3)).is_overdue(NOW)

    def test_no_due_date_or_future_due_date(self) -> None:
        assert not _task().is_overdue(NOW)
        assert not _task(due_date=NOW + timedelta(minutes=1)).is_overdue(NOW)


class TestStatusTransitions:
    def test_completing_stamps_completed_at(self) -> None:
        change = _task(status=TaskStatus.IN_PROGRESS).plan_status_change(TaskStatus.COMPLETED, NOW)
        assert change.completed_at == NOW
        assert change.action == TaskActivityAction.COMPLETED
        assert not change.is_noop

    def test_recompleting_keeps_original_timestamp(self) -> None:
        earlier = NOW - timedelta(days=1)
        task = _task(status=TaskStatus.COMPLETED, completed_at=earlier)
        change = task.plan_status_change(TaskStatus.COMPLETED, NOW)
        assert change.is_noop
        assert change.completed_at == earlier

    def test_reopening_clears_completed_at(self) -> None:
        task = _task(status=TaskStatus.COMPLETED, completed_at=NOW)
        change = task.plan_status_change(TaskStatus.IN_PROGRESS, NOW)
        assert change.completed_at is None
        assert change.action == TaskActivityAction.REOPENED

    def test_cancel_open_task(self) -> None:
        change = _task().plan_status_change(TaskStatus.CANCELLED, NOW)
        assert change.action == TaskActivityAction.CANCELLED
        assert change.completed_at is None

    def test_completed_task_cannot_be_cancelled(self) -> None:
        task = _task(status=TaskStatus.COMPLETED, completed_at=NOW)
        with pytest.raises(ValidationException, match="reopen"):
            task.plan_status_change(TaskStatus.CANCELLED, NOW)

    def test_cancelled_task_can_be_completed(self) -> None:
        change = _task(status=TaskStatus.CANCELLED).plan_status_change(TaskStatus.COMPLETED, NOW)
        assert change.completed_at == NOW

    def test_plain_move_is_status_changed(self) -> None:
        task = _task()
        change = task.plan_status_change(TaskStatus.REVIEW, NOW)
        assert change.action == TaskActivityAction.STATUS_CHANGED
        task.apply(change)
        assert task.status == TaskStatus.REVIEW
