from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from workforce.database import get_db
from workforce.core.auth import get_current_user, get_optional_user
from workforce.schemas.attendance import (
    ScanRequest,
    AttendanceResult,
    AttendanceRecordResponse,
    AttendanceStatusResponse,
    AttendanceHistoryResponse,
)
from workforce.services.attendance import get_latest_record, get_recent_records, state_after
from workforce.services.scan import resolve_scan


router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/scan", response_model=AttendanceResult)
async def scan(
    scan_in: ScanRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_optional_user)
):
    # Anonymous callers are allowed through; the resolver decides what they may do
    return await resolve_scan(
        db,
        current_user,
        scan_in.scanned_content,
        scan_in.location,
        background_tasks=background_tasks,
    )


@router.get("/status", response_model=AttendanceStatusResponse)
async def get_attendance_status(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    last = await get_latest_record(db, current_user.id)
    return AttendanceStatusResponse(
        state=state_after(last),
        last_record=AttendanceRecordResponse.model_validate(last) if last else None,
    )


@router.get("/history", response_model=AttendanceHistoryResponse)
async def get_attendance_history(
    limit: int = Query(30, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    records = await get_recent_records(db, current_user.id, limit)
    return AttendanceHistoryResponse(
        records=[AttendanceRecordResponse.model_validate(r) for r in records]
    )
