from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class CompanySettingsUpdate(BaseModel):
    office_lat: float = Field(..., ge=-90, le=90)
    office_lng: float = Field(..., ge=-180, le=180)
    geofence_radius: float = Field(0, ge=0)  # meters, 0 disables geofencing

class CompanySettingsResponse(BaseModel):
    id: int
    office_lat: float
    office_lng: float
    geofence_radius: float
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
