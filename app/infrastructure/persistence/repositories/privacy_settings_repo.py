"""User privacy settings repository. Batch lookup for the privacy filter."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.privacy import PrivacySettingsResult, PrivacySettingsUpdate
from app.infrastructure.persistence.models.privacy_settings import UserPrivacySettings


def _to_result(row: UserPrivacySettings) -> PrivacySettingsResult:
    return PrivacySettingsResult(
        user_id=row.user_id,
        hide_tasks_from_peers=row.hide_tasks_from_peers,
        hide_activity_from_peers=row.hide_activity_from_peers,
        hide_performance_from_peers=row.hide_performance_from_peers,
        hide_calendar_from_peers=row.hide_calendar_from_peers,
        visible_to_user_ids=tuple(row.visible_to_user_ids or ()),
    )


class PrivacySettingsRepository:
    """Implements the privacy settings lookup used by PrivacyFilter."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_for_users(
        self, tenant_id: str, user_ids: Iterable[str]
    ) -> dict[str, PrivacySettingsResult]:
        """Settings rows for user_ids in one query. Users without a row are absent."""
        ids = {u for u in user_ids if u}
        if not ids:
            return {}
        result = await self.db.execute(
            select(UserPrivacySettings).where(
                UserPrivacySettings.tenant_id == tenant_id,
                UserPrivacySettings.user_id.in_(ids),
            )
        )
        return {row.user_id: _to_result(row) for row in result.scalars().all()}

    async def get(self, tenant_id: str, user_id: str) -> PrivacySettingsResult | None:
        rows = await self.get_for_users(tenant_id, [user_id])
        return rows.get(user_id)

    async def upsert(
        self, tenant_id: str, user_id: str, update: PrivacySettingsUpdate
    ) -> PrivacySettingsResult:
        """Create the row on first write; apply only the fields that are set."""
        result = await self.db.execute(
            select(UserPrivacySettings).where(
                UserPrivacySettings.tenant_id == tenant_id,
                UserPrivacySettings.user_id == user_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = UserPrivacySettings(tenant_id=tenant_id, user_id=user_id, visible_to_user_ids=[])
            self.db.add(row)
        for name in (
            "hide_tasks_from_peers",
            "hide_activity_from_peers",
            "hide_performance_from_peers",
            "hide_calendar_from_peers",
        ):
            value = getattr(update, name)
            if value is not None:
                setattr(row, name, value)
        if update.visible_to_user_ids is not None:
            row.visible_to_user_ids = list(update.visible_to_user_ids)
        await self.db.flush()
        await self.db.refresh(row)
        return _to_result(row)
