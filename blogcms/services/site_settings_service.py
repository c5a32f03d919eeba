"""Singleton site settings with a long-lived cached read."""

from collections.abc import Mapping
from typing import Any

from blogcms.managers.invalidation import ROOT_LAYOUT, SETTINGS_PATHS, SITE_SETTINGS_TAG, settings_tags
from blogcms.repositories import SiteSettingsRepository
from blogcms.schemas import SiteSettingsResponse, SiteSettingsUpdate
from blogcms.services.base import BaseService, validate_input

SITE_SETTINGS_TTL = 3600  # seconds


class SiteSettingsService(BaseService):
    async def _load(self) -> SiteSettingsResponse | None:
        async with self.db.session() as session:
            record = await SiteSettingsRepository(session).get()
        return SiteSettingsResponse.model_validate(record) if record else None

    async def get_settings(self) -> SiteSettingsResponse | None:
        """Stored settings, or None before they were ever saved."""
        load = self.cache.cached(
            self._load,
            ["site-settings"],
            ttl=SITE_SETTINGS_TTL,
            tags=[SITE_SETTINGS_TAG],
            response_model=SiteSettingsResponse | None,
        )
        return await load()

    async def update_settings(
        self,
        data: SiteSettingsUpdate | Mapping[str, Any],
    ) -> SiteSettingsResponse:
        payload = validate_input(SiteSettingsUpdate, data)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        async with self.db.transaction() as session:
            repo = SiteSettingsRepository(session)
            record = await repo.get_or_create()
            updated = SiteSettingsResponse.model_validate(await repo.update(record, changes))

        # Metadata appears on every page, hence the root layout
        await self.invalidation.invalidate(
            tags=settings_tags(),
            paths=SETTINGS_PATHS,
            layouts=[ROOT_LAYOUT],
        )
        return updated
