"""Per-user privacy settings ORM model. Absence of a row means fully visible."""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import JsonType, MultiTenantModel


def _hide_flag() -> Mapped[bool]:
    return mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )


class UserPrivacySettings(MultiTenantModel, Base):
    """Table: user_privacy_settings. One row per (tenant_id, user_id)."""

    __tablename__ = "user_privacy_settings"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    hide_tasks_from_peers: Mapped[bool] = _hide_flag()
    hide_activity_from_peers: Mapped[bool] = _hide_flag()
    hide_performance_from_peers: Mapped[bool] = _hide_flag()
    hide_calendar_from_peers: Mapped[bool] = _hide_flag()
    visible_to_user_ids: Mapped[list[str]] = mapped_column(
        JsonType, nullable=False, default=list
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_user_privacy_settings_user"),
    )
