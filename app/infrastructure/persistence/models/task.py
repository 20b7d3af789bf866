"""Task ORM model. A unit of firm work that sits in the pool until claimed or assigned."""

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import TaskPriority, TaskSourceType, TaskStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    JsonType,
    MultiTenantModel,
    enum_check,
)


def _user_fk() -> ForeignKey:
    return ForeignKey("app_user.id", ondelete="SET NULL")


class Task(MultiTenantModel, Base):
    """Table: task.

    A task with assigned_to and claimed_by both null is in the pool.
    completed_at is set iff status is completed (enforced by CHECK).
    """

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=TaskStatus.OPEN.value,
        server_default=TaskStatus.OPEN.value,
    )
    priority: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=TaskPriority.MEDIUM.value,
        server_default=TaskPriority.MEDIUM.value,
    )
    source_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=TaskSourceType.MANUAL.value,
        server_default=TaskSourceType.MANUAL.value,
    )
    source_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        JsonType, nullable=True
    )
    source_email_id: Mapped[str | None] = mapped_column(String, nullable=True)

    action_type_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("task_action_type.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    client_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("client.id", ondelete="SET NULL"), nullable=True, index=True
    )

    assigned_to: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)
    assigned_by: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)
    assigned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    claimed_by: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)

    routed_from_task_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("task.id", ondelete="SET NULL"), nullable=True
    )
    handoff_to: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)
    handoff_from: Mapped[str | None] = mapped_column(String, _user_fk(), nullable=True)
    handoff_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    handoff_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        enum_check("status", TaskStatus.values(), "task_status_check"),
        enum_check("priority", TaskPriority.values(), "task_priority_check"),
        enum_check("source_type", TaskSourceType.values(), "task_source_type_check"),
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="task_completed_at_check",
        ),
        Index("ix_task_tenant_assigned_to", "tenant_id", "assigned_to"),
        Index("ix_task_tenant_claimed_by", "tenant_id", "claimed_by"),
        Index("ix_task_tenant_status", "tenant_id", "status"),
        Index("ix_task_tenant_handoff_to", "tenant_id", "handoff_to"),
        Index(
            "ix_task_pool",
            "tenant_id",
            "created_at",
            postgresql_where=text("assigned_to IS NULL AND claimed_by IS NULL"),
        ),
    )
