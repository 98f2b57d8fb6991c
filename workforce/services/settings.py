from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from workforce.core.enums import Role
from workforce.core.exceptions import AuthorizationDenied, ValidationError
from workforce.models.settings import CompanySettings


async def get_company_settings(db: AsyncSession) -> Optional[CompanySettings]:
    result = await db.execute(select(CompanySettings).order_by(CompanySettings.id).limit(1))
    return result.scalar_one_or_none()


async def save_company_settings(
    db: AsyncSession, admin, office_lat: float, office_lng: float, geofence_radius: float
) -> CompanySettings:
    """Update the singleton row, creating it on first save."""
    if admin.role != Role.ADMIN:
        raise AuthorizationDenied("Only admins can change company settings")
    if geofence_radius < 0:
        raise ValidationError("Geofence radius cannot be negative")

    current = await get_company_settings(db)
    if current is None:
        current = CompanySettings()
        db.add(current)
    current.office_lat = office_lat
    current.office_lng = office_lng
    current.geofence_radius = geofence_radius
    await db.commit()
    await db.refresh(current)
    return current
