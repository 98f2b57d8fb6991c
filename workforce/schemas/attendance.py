from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from workforce.core.enums import AttendanceState, AttendanceType
from workforce.schemas.qr import GeoPoint

class ScanRequest(BaseModel):
    scanned_content: str = Field(..., min_length=1)  # "USER:<id>" or a signed token
    location: Optional[GeoPoint] = None               # scanning device's position

class AttendanceResult(BaseModel):
    user_id: int
    event_type: AttendanceType
    is_late: bool
    message: str
    timestamp: datetime

class AttendanceRecordResponse(BaseModel):
    id: int
    user_id: int
    type: AttendanceType
    method: str
    timestamp: datetime
    is_late: bool

    model_config = {"from_attributes": True}

class AttendanceStatusResponse(BaseModel):
    state: AttendanceState
    last_record: Optional[AttendanceRecordResponse] = None

class AttendanceHistoryResponse(BaseModel):
    records: List[AttendanceRecordResponse]
