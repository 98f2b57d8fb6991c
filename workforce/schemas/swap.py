from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from workforce.core.enums import SwapStatus

class ShiftResponse(BaseModel):
    id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    type: str
    status: str
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

class SwapRequestCreate(BaseModel):
    shift_id: int
    reason: Optional[str] = Field(None, max_length=500)

class SwapRequestResponse(BaseModel):
    id: int
    shift_id: int
    requester_id: int
    claimant_id: Optional[int]
    status: SwapStatus
    reason: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    shift: ShiftResponse

    model_config = {"from_attributes": True}
