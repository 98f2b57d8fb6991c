from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from workforce.database import get_db
from workforce.core.auth import get_current_admin
from workforce.schemas.settings import CompanySettingsUpdate, CompanySettingsResponse
from workforce.services.settings import get_company_settings, save_company_settings


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/settings", response_model=CompanySettingsResponse)
async def read_settings(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    current = await get_company_settings(db)
    if current is None:
        raise HTTPException(404, "Office location not configured yet")
    return current


@router.put("/settings", response_model=CompanySettingsResponse)
async def update_settings(
    settings_in: CompanySettingsUpdate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await save_company_settings(
        db,
        admin,
        settings_in.office_lat,
        settings_in.office_lng,
        settings_in.geofence_radius,
    )
