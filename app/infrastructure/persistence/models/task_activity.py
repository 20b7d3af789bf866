"""Task activity ORM model. Append-only per-task history (one row per transition or comment)."""

from typing import Any

from sqlalchemy import Connection, ForeignKey, Index, String, Text, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from app.domain.enums import TaskActivityAction
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    JsonType,
    TenantMixin,
    enum_check,
)


class TaskActivity(CuidMixin, TenantMixin, CreatedAtMixin, Base):
    """Table: task_activity. Never updated or deleted through the ORM."""

    __tablename__ = "task_activity"

    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JsonType, nullable=True)

    __table_args__ = (
        enum_check("action", TaskActivityAction.values(), "task_activity_action_check"),
        Index("ix_task_activity_task_created", "task_id", "created_at"),
        Index("ix_task_activity_tenant_user", "tenant_id", "user_id"),
    )


@event.listens_for(TaskActivity, "before_update")
def _prevent_task_activity_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: TaskActivity
) -> None:
    raise ValueError("Task activity entries are immutable and cannot be updated.")


@event.listens_for(TaskActivity, "before_delete")
def _prevent_task_activity_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: TaskActivity
) -> None:
    raise ValueError("Task activity entries cannot be deleted.")
