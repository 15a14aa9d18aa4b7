"""
Site settings service: exposes settings as a flat {key: value} map.
"""

from typing import Any, Dict

from portfolio.repositories.site_settings import SiteSettingsRepository


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SiteSettingsService:
    def __init__(self, repository: SiteSettingsRepository):
        self.repository = repository

    async def get_all(self) -> Dict[str, str]:
        return {s.key: s.value for s in await self.repository.list_settings()}

    async def update(self, values: Dict[str, Any]) -> Dict[str, str]:
        """
        Upsert every pair and return the full map.

        Values are stored as strings; None becomes an empty string.
        """
        normalized = {str(key): _as_text(value) for key, value in values.items()}
        await self.repository.bulk_upsert(normalized)
        return await self.get_all()
