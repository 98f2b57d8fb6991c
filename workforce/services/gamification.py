"""Badge awards triggered by attendance events.

Failures here never propagate to the caller: a check-in that was committed
stays committed even if awarding a badge blows up.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from workforce.core.enums import AttendanceType, GamificationEvent
from workforce.database import AsyncSessionLocal
from workforce.models.achievement import Achievement
from workforce.models.attendance import AttendanceRecord

logger = logging.getLogger(__name__)

EARLY_BIRD = {
    "title": "Early Bird",
    "description": "On time for the last 5 shifts.",
    "icon": "zap",
}
EARLY_BIRD_STREAK = 5


async def award_badges(db: AsyncSession, user_id: int, event: GamificationEvent) -> List[Achievement]:
    """Evaluate badge rules for `event` and persist any newly earned achievements."""
    existing = await db.execute(select(Achievement.title).where(Achievement.user_id == user_id))
    owned = set(existing.scalars().all())
    earned = []

    if event == GamificationEvent.ATTENDANCE_CHECKIN and EARLY_BIRD["title"] not in owned:
        result = await db.execute(
            select(AttendanceRecord.is_late)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.type == AttendanceType.CHECK_IN.value)
            .order_by(AttendanceRecord.sequence.desc())
            .limit(EARLY_BIRD_STREAK)
        )
        recent = result.scalars().all()
        if len(recent) >= EARLY_BIRD_STREAK and not any(recent):
            earned.append(Achievement(user_id=user_id, **EARLY_BIRD))

    for badge in earned:
        db.add(badge)
    if earned:
        await db.commit()
        logger.info("Awarded %s to user %s", [b.title for b in earned], user_id)
    return earned


async def award_badges_safely(db: AsyncSession, user_id: int, event: GamificationEvent) -> None:
    try:
        await award_badges(db, user_id, event)
    except Exception:
        logger.exception("Badge award failed for user %s on %s", user_id, event.value)
        await db.rollback()


async def award_badges_detached(
    user_id: int,
    event: GamificationEvent,
    session_factory: Optional[async_sessionmaker] = None,
) -> None:
    """Background-task entry point; runs after the response with its own session."""
    factory = session_factory or AsyncSessionLocal
    async with factory() as db:
        await award_badges_safely(db, user_id, event)
