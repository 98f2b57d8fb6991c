from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, Literal, Optional, Union


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class OfficeQRPayload(BaseModel):
    type: Literal["OFFICE_QR"] = "OFFICE_QR"
    location: Optional[GeoPoint] = None  # displaying device's GPS at issuance
    iat: Optional[int] = None
    exp: Optional[int] = None


class UserQRPayload(BaseModel):
    type: Literal["USER_QR"] = "USER_QR"
    user_id: int
    iat: Optional[int] = None
    exp: Optional[int] = None


QRPayload = Annotated[Union[OfficeQRPayload, UserQRPayload], Field(discriminator="type")]


class OfficeQRRequest(BaseModel):
    location: Optional[GeoPoint] = None


class QRTokenResponse(BaseModel):
    token: str
    expires_at: datetime
    refresh_interval_seconds: Optional[int] = None
