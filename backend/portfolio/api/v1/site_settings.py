"""
Site settings endpoints.

GET returns the flat {key: value} map to everyone; POST upserts keys and
requires an authenticated admin.
"""

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends

from portfolio.api.dependencies import CurrentAdmin, DatabaseSession
from portfolio.repositories.site_settings import SiteSettingsRepository
from portfolio.services.site_settings import SiteSettingsService


router = APIRouter()


def get_site_settings_service(db: DatabaseSession) -> SiteSettingsService:
    return SiteSettingsService(SiteSettingsRepository(db))


SiteSettingsServiceDep = Annotated[SiteSettingsService, Depends(get_site_settings_service)]


@router.get("", response_model=Dict[str, str])
async def get_site_settings(service: SiteSettingsServiceDep):
    return await service.get_all()


@router.post("", response_model=Dict[str, str])
async def update_site_settings(
    values: Annotated[Dict[str, Any], Body()],
    admin: CurrentAdmin,
    service: SiteSettingsServiceDep,
):
    return await service.update(values)
