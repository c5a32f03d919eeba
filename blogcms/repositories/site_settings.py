"""Access to the singleton site settings row."""

from blogcms.models import SITE_SETTINGS_ID, SiteSettingsDB
from blogcms.repositories.base import BaseRepository


class SiteSettingsRepository(BaseRepository[SiteSettingsDB]):
    model = SiteSettingsDB

    async def get(self) -> SiteSettingsDB | None:
        return await self.get_by_id(SITE_SETTINGS_ID)

    async def get_or_create(self) -> SiteSettingsDB:
        """Return the settings row, inserting defaults on first use."""
        record = await self.get()
        if record is None:
            record = await self.create({"id": SITE_SETTINGS_ID})
        return record
