"""
Site settings repository for key/value storage.
"""

from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.site_setting import SiteSetting


class SiteSettingsRepository:
    """
    Repository for SiteSetting data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_settings(self) -> List[SiteSetting]:
        result = await self.session.execute(select(SiteSetting).order_by(SiteSetting.key))
        return list(result.scalars().all())

    async def get_by_key(self, key: str) -> Optional[SiteSetting]:
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        return result.scalar_one_or_none()

    async def upsert(self, key: str, value: str, description: Optional[str] = None) -> SiteSetting:
        """
        Create the setting or update its value (upsert).

        An existing description is kept when none is supplied.
        """
        setting = await self.get_by_key(key)
        if setting is None:
            setting = SiteSetting(key=key, value=value, description=description)
            self.session.add(setting)
        else:
            setting.value = value
            if description is not None:
                setting.description = description

        await self.session.flush()
        return setting

    async def bulk_upsert(self, values: Dict[str, str]) -> None:
        for key, value in values.items():
            await self.upsert(key, value)
