"""Team directory, per-user privacy settings and privacy-aware stats."""

from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dtos.privacy import (
    PrivacySettingsResult,
    PrivacySettingsUpdate,
    UserStats,
)
from app.application.dtos.user import UserResult, Viewer
from app.application.interfaces.repositories import (
    IPrivacySettingsRepository,
    ITaskRepository,
    IUserRepository,
)
from app.application.services.privacy_filter import PrivacyFilter
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(
        self,
        user_repo: IUserRepository,
        settings_repo: IPrivacySettingsRepository,
        task_repo: ITaskRepository,
        privacy_filter: PrivacyFilter,
    ) -> None:
        self.user_repo = user_repo
        self.settings_repo = settings_repo
        self.task_repo = task_repo
        self.privacy_filter = privacy_filter

    async def team(self, tenant_id: str) -> list[UserResult]:
        """Active members shown in the task pool, by name."""
        return await self.user_repo.list_team(tenant_id)

    async def _require_user(self, tenant_id: str, user_id: str) -> UserResult:
        user = await self.user_repo.get_by_id_and_tenant(user_id, tenant_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def get_privacy(
        self, tenant_id: str, user_id: str, viewer: Viewer
    ) -> PrivacySettingsResult:
        """Settings for user_id (self or administrator); defaults when no row exists."""
        if viewer.user_id != user_id and not viewer.is_administrator:
            raise AuthorizationException(resource="privacy", action="read")
        await self._require_user(tenant_id, user_id)
        settings = await self.settings_repo.get(tenant_id, user_id)
        return settings or PrivacySettingsResult(user_id=user_id, is_default=True)

    async def update_privacy(
        self,
        tenant_id: str,
        user_id: str,
        update: PrivacySettingsUpdate,
        viewer: Viewer,
    ) -> PrivacySettingsResult:
        """Upsert the caller's own settings.

        visible_to_user_ids is deduplicated (first occurrence wins), may not
        contain the user itself, and must name members of the tenant.
        """
        if viewer.user_id != user_id:
            raise AuthorizationException(resource="privacy", action="update")
        if update.visible_to_user_ids is not None:
            ids = tuple(dict.fromkeys(i for i in update.visible_to_user_ids if i))
            if user_id in ids:
                raise ValidationException(
                    "visible_to_user_ids cannot include yourself",
                    field="visible_to_user_ids",
                )
            unknown = set(ids) - await self.user_repo.existing_ids(tenant_id, set(ids))
            if unknown:
                raise ValidationException(
                    f"Unknown users: {sorted(unknown)}", field="visible_to_user_ids"
                )
            update = replace(update, visible_to_user_ids=ids)
        settings = await self.settings_repo.upsert(tenant_id, user_id, update)
        logger.info("Privacy settings updated for user %s", user_id)
        return settings

    async def stats(self, tenant_id: str, user_id: str, viewer: Viewer) -> UserStats:
        """Task numbers for user_id, or an explicit hidden result."""
        await self._require_user(tenant_id, user_id)
        return await self.privacy_filter.get_user_stats_with_privacy(
            viewer,
            user_id,
            tenant_id,
            lambda: self.task_repo.user_counts(tenant_id, user_id),
        )
