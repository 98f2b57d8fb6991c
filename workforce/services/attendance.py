import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.config import settings
from workforce.core.enums import AttendanceState, AttendanceType, GamificationEvent
from workforce.core.exceptions import ConflictError, NotFoundError
from workforce.models.attendance import AttendanceRecord
from workforce.models.shift import Shift
from workforce.models.user import User
from workforce.schemas.attendance import AttendanceResult
from workforce.schemas.qr import GeoPoint
from workforce.services.gamification import award_badges_detached, award_badges_safely

logger = logging.getLogger(__name__)


async def get_latest_record(db: AsyncSession, user_id: int) -> Optional[AttendanceRecord]:
    result = await db.execute(
        select(AttendanceRecord)
        .where(AttendanceRecord.user_id == user_id)
        .order_by(AttendanceRecord.sequence.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def state_after(record: Optional[AttendanceRecord]) -> AttendanceState:
    """No prior record counts as checked out."""
    if record is not None and record.type == AttendanceType.CHECK_IN:
        return AttendanceState.CHECKED_IN
    return AttendanceState.CHECKED_OUT


async def get_attendance_state(db: AsyncSession, user_id: int) -> AttendanceState:
    return state_after(await get_latest_record(db, user_id))


async def get_recent_records(db: AsyncSession, user_id: int, limit: int = 30) -> List[AttendanceRecord]:
    result = await db.execute(
        select(AttendanceRecord)
        .where(AttendanceRecord.user_id == user_id)
        .order_by(AttendanceRecord.sequence.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def find_shift_for_checkin(db: AsyncSession, user_id: int, at: datetime) -> Optional[Shift]:
    """The user's shift on the local calendar day of `at` whose start is nearest to `at`.

    Split shifts are judged against the block being checked into; ties go to the earlier start.
    """
    day_start = datetime.combine(at.date(), datetime.min.time())
    result = await db.execute(
        select(Shift)
        .where(Shift.user_id == user_id)
        .where(Shift.start_time >= day_start)
        .where(Shift.start_time < day_start + timedelta(days=1))
        .order_by(Shift.start_time)
    )
    shifts = result.scalars().all()
    if not shifts:
        return None
    return min(shifts, key=lambda s: abs(s.start_time - at))


def is_late_for_shift(shift: Optional[Shift], at: datetime) -> bool:
    if shift is None:
        return False
    deadline = shift.start_time + timedelta(minutes=settings.LATE_TOLERANCE_MINUTES)
    return at > deadline


def build_message(event_type: AttendanceType, name: str, is_late: bool) -> str:
    if event_type == AttendanceType.CHECK_IN:
        suffix = " (you are late!)" if is_late else ""
        return f"Welcome, {name}{suffix}"
    return f"Goodbye, {name}"


async def record_attendance(
    db: AsyncSession,
    user_id: int,
    *,
    event_type: Optional[AttendanceType] = None,
    location: Optional[GeoPoint] = None,
    now: Optional[datetime] = None,
    method: str = "QR",
    background_tasks: Optional[BackgroundTasks] = None,
) -> AttendanceResult:
    now = now or datetime.now()

    # Row lock serializes concurrent scans for the same identity on PostgreSQL.
    # The (user_id, sequence) unique constraint catches whatever slips through.
    result = await db.execute(select(User).where(User.id == user_id).with_for_update())
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("Employee not found")

    last = await get_latest_record(db, user_id)
    new_type = event_type or state_after(last).next_event

    is_late = False
    if new_type == AttendanceType.CHECK_IN:
        shift = await find_shift_for_checkin(db, user_id, now)
        is_late = is_late_for_shift(shift, now)

    record = AttendanceRecord(
        user_id=user_id,
        sequence=(last.sequence if last else 0) + 1,
        type=new_type.value,
        method=method,
        timestamp=now,
        is_late=is_late,
    )
    db.add(record)

    if location is not None:
        user.last_lat = location.lat
        user.last_lng = location.lng
        user.last_location_at = now

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Concurrent attendance write rejected for user %s", user_id)
        raise ConflictError("Another scan for this employee is already being processed. Please try again.")

    logger.info("Recorded %s for user %s (late=%s)", new_type.value, user_id, is_late)

    if new_type == AttendanceType.CHECK_IN:
        if background_tasks is not None:
            background_tasks.add_task(award_badges_detached, user_id, GamificationEvent.ATTENDANCE_CHECKIN)
        else:
            await award_badges_safely(db, user_id, GamificationEvent.ATTENDANCE_CHECKIN)

    return AttendanceResult(
        user_id=user_id,
        event_type=new_type,
        is_late=is_late,
        message=build_message(new_type, user.name, is_late),
        timestamp=now,
    )
