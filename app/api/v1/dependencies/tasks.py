"""Task, task pool, feed and team service dependencies (composition root).

Read routes get services on a plain session (get_db); write routes get them on
the request transaction (get_db_transactional), shared with ensure_audit_logged
so the change, its activity rows and the audit row commit together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.privacy_filter import PrivacyFilter
from app.application.use_cases.feeds import TaskFeedService
from app.application.use_cases.tasks import (
    SubtaskService,
    TaskActivityService,
    TaskAssignmentService,
    TaskService,
)
from app.application.use_cases.users import TeamService
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    ActionTypeRepository,
    ClientRepository,
    PrivacySettingsRepository,
    SubtaskRepository,
    TaskActivityRepository,
    TaskHandoffRepository,
    TaskRepository,
    UserRepository,
)


def _activity_service(db: AsyncSession, task_repo: TaskRepository) -> TaskActivityService:
    return TaskActivityService(
        TaskActivityRepository(db),
        task_repo,
        PrivacyFilter(PrivacySettingsRepository(db)),
    )


def _assignment_service(
    db: AsyncSession, task_repo: TaskRepository, activity: TaskActivityService
) -> TaskAssignmentService:
    return TaskAssignmentService(
        task_repo,
        activity,
        UserRepository(db),
        handoff_repo=TaskHandoffRepository(db),
        action_type_repo=ActionTypeRepository(db),
        privacy_filter=PrivacyFilter(PrivacySettingsRepository(db)),
    )


def _task_service(db: AsyncSession) -> TaskService:
    task_repo = TaskRepository(db)
    activity = _activity_service(db, task_repo)
    return TaskService(
        task_repo=task_repo,
        activity=activity,
        assignment=_assignment_service(db, task_repo, activity),
        privacy_filter=PrivacyFilter(PrivacySettingsRepository(db)),
        action_type_repo=ActionTypeRepository(db),
        client_repo=ClientRepository(db),
        user_repo=UserRepository(db),
    )


def get_task_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskService:
    """Task service for reads (get, list)."""
    return _task_service(db)


def get_task_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskService:
    """Task service for create/update/delete (transactional)."""
    return _task_service(db)


def get_task_assignment_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskAssignmentService:
    """Claim/assign/status/complete/handoff (transactional)."""
    task_repo = TaskRepository(db)
    return _assignment_service(db, task_repo, _activity_service(db, task_repo))


def get_handoff_history_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskAssignmentService:
    """Assignment service on a read session (handoff history only)."""
    task_repo = TaskRepository(db)
    return _assignment_service(db, task_repo, _activity_service(db, task_repo))


def get_task_activity_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskActivityService:
    return _activity_service(db, TaskRepository(db))


def get_task_activity_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskActivityService:
    return _activity_service(db, TaskRepository(db))


def _subtask_service(db: AsyncSession) -> SubtaskService:
    task_repo = TaskRepository(db)
    return SubtaskService(
        SubtaskRepository(db),
        task_repo,
        _activity_service(db, task_repo),
        PrivacyFilter(PrivacySettingsRepository(db)),
    )


def get_subtask_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SubtaskService:
    return _subtask_service(db)


def get_subtask_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> SubtaskService:
    return _subtask_service(db)


def get_task_feed_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskFeedService:
    """Pool, org feed, inbox, stats and action types (read-only)."""
    return TaskFeedService(
        TaskRepository(db),
        PrivacyFilter(PrivacySettingsRepository(db)),
        ActionTypeRepository(db),
    )


def _team_service(db: AsyncSession) -> TeamService:
    settings_repo = PrivacySettingsRepository(db)
    return TeamService(
        user_repo=UserRepository(db),
        settings_repo=settings_repo,
        task_repo=TaskRepository(db),
        privacy_filter=PrivacyFilter(settings_repo),
    )


def get_team_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamService:
    return _team_service(db)


def get_team_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TeamService:
    """Team service for privacy updates (transactional)."""
    return _team_service(db)
