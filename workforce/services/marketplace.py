"""Shift swap marketplace.

OPEN -> PENDING_APPROVAL (claimed by another employee)
     -> APPROVED (admin; shift changes owner) | REJECTED (admin; terminal)

Every transition is a conditional UPDATE on the current status, so two
concurrent callers can never both move the same request.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.enums import ACTIVE_SWAP_STATUSES, Role, SwapStatus
from workforce.core.exceptions import AuthorizationDenied, ConflictError, NotFoundError, ValidationError
from workforce.models.shift import Shift
from workforce.models.swap import ShiftSwapRequest

logger = logging.getLogger(__name__)


def _require_admin(user) -> None:
    if user is None or user.role != Role.ADMIN:
        raise AuthorizationDenied("Admin access required")


async def _get_request(db: AsyncSession, request_id: int) -> ShiftSwapRequest:
    request = await db.get(ShiftSwapRequest, request_id)
    if request is None:
        raise NotFoundError("Swap request not found")
    return request


async def _transition(
    db: AsyncSession, request_id: int, expected: SwapStatus, **values
) -> None:
    """Move the request out of `expected`, or raise ConflictError if someone else did first."""
    result = await db.execute(
        update(ShiftSwapRequest)
        .where(ShiftSwapRequest.id == request_id)
        .where(ShiftSwapRequest.status == expected.value)
        .values(**values)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise ConflictError("This shift has already been claimed or is no longer available")


async def _has_overlap(db: AsyncSession, user_id: int, shift: Shift, include_pending: bool = True) -> bool:
    """True if `user_id` owns (or, with `include_pending`, has claimed) a shift overlapping `shift`."""
    owned = await db.execute(
        select(Shift.id)
        .where(Shift.user_id == user_id)
        .where(Shift.id != shift.id)
        .where(Shift.start_time < shift.end_time)
        .where(Shift.end_time > shift.start_time)
        .limit(1)
    )
    if owned.first() is not None:
        return True
    if not include_pending:
        return False

    pending = await db.execute(
        select(ShiftSwapRequest.id)
        .join(Shift, Shift.id == ShiftSwapRequest.shift_id)
        .where(ShiftSwapRequest.claimant_id == user_id)
        .where(ShiftSwapRequest.status == SwapStatus.PENDING_APPROVAL.value)
        .where(Shift.id != shift.id)
        .where(Shift.start_time < shift.end_time)
        .where(Shift.end_time > shift.start_time)
        .limit(1)
    )
    return pending.first() is not None


async def create_swap_request(
    db: AsyncSession,
    requester,
    shift_id: int,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ShiftSwapRequest:
    now = now or datetime.now()
    shift = await db.get(Shift, shift_id)
    if shift is None or shift.user_id != requester.id:
        raise NotFoundError("Shift not found or not owned by you")
    if shift.start_time <= now:
        raise ValidationError("This shift has already started")

    existing = await db.execute(
        select(ShiftSwapRequest.id)
        .where(ShiftSwapRequest.shift_id == shift_id)
        .where(ShiftSwapRequest.status.in_([s.value for s in ACTIVE_SWAP_STATUSES]))
    )
    if existing.first() is not None:
        raise ConflictError("This shift is already on the marketplace")

    request = ShiftSwapRequest(
        shift_id=shift_id,
        requester_id=requester.id,
        status=SwapStatus.OPEN.value,
        reason=(reason or "").strip() or None,
    )
    db.add(request)
    try:
        await db.commit()
    except IntegrityError:
        # uq_swap_active_shift: a concurrent offer of the same shift won
        await db.rollback()
        raise ConflictError("This shift is already on the marketplace")
    await db.refresh(request)
    logger.info("User %s offered shift %s (request %s)", requester.id, shift_id, request.id)
    return request


async def claim_swap_request(
    db: AsyncSession, request_id: int, claimant, now: Optional[datetime] = None
) -> ShiftSwapRequest:
    now = now or datetime.now()
    request = await _get_request(db, request_id)

    if request.requester_id == claimant.id:
        raise ValidationError("You cannot claim your own shift")
    if request.status != SwapStatus.OPEN:
        raise ConflictError("This shift has already been claimed or is no longer available")

    shift = request.shift
    if shift.start_time <= now:
        raise ValidationError("This shift has already started")

    if await _has_overlap(db, claimant.id, shift):
        raise ConflictError("You already have a shift during these hours")

    await _transition(
        db,
        request_id,
        SwapStatus.OPEN,
        status=SwapStatus.PENDING_APPROVAL.value,
        claimant_id=claimant.id,
        updated_at=now,
    )
    await db.commit()
    await db.refresh(request)
    logger.info("User %s claimed swap request %s", claimant.id, request_id)
    return request


async def approve_swap_request(db: AsyncSession, admin, request_id: int) -> ShiftSwapRequest:
    _require_admin(admin)
    request = await _get_request(db, request_id)
    if request.status != SwapStatus.PENDING_APPROVAL or request.claimant_id is None:
        raise ConflictError("Swap request is not awaiting approval")

    requester_id, claimant_id = request.requester_id, request.claimant_id
    await _transition(
        db, request_id, SwapStatus.PENDING_APPROVAL, status=SwapStatus.APPROVED.value, updated_at=datetime.now()
    )

    # Same transaction as the status change; any failure below undoes it
    shift = await db.get(Shift, request.shift_id, populate_existing=True)
    if shift.user_id != requester_id:
        await db.rollback()
        raise ConflictError("The shift is no longer owned by the requester")
    if await _has_overlap(db, claimant_id, shift, include_pending=False):
        await db.rollback()
        raise ConflictError("The claimant already has a shift during these hours")

    shift.user_id = claimant_id
    note = f"[Swapped from {requester_id} to {claimant_id}]"
    shift.notes = f"{shift.notes}\n{note}" if shift.notes else note

    await db.commit()
    await db.refresh(request)
    logger.info("Admin %s approved swap request %s", admin.id, request_id)
    return request


async def reject_swap_request(db: AsyncSession, admin, request_id: int) -> ShiftSwapRequest:
    _require_admin(admin)
    request = await _get_request(db, request_id)
    if request.status != SwapStatus.PENDING_APPROVAL:
        raise ConflictError("Swap request is not awaiting approval")

    await _transition(
        db, request_id, SwapStatus.PENDING_APPROVAL, status=SwapStatus.REJECTED.value, updated_at=datetime.now()
    )
    await db.commit()
    await db.refresh(request)
    logger.info("Admin %s rejected swap request %s", admin.id, request_id)
    return request


async def list_open_requests(
    db: AsyncSession, viewer, now: Optional[datetime] = None
) -> List[ShiftSwapRequest]:
    """The marketplace: open requests from other employees for shifts not yet started."""
    now = now or datetime.now()
    result = await db.execute(
        select(ShiftSwapRequest)
        .join(Shift, Shift.id == ShiftSwapRequest.shift_id)
        .where(ShiftSwapRequest.status == SwapStatus.OPEN.value)
        .where(ShiftSwapRequest.requester_id != viewer.id)
        .where(Shift.start_time > now)
        .order_by(ShiftSwapRequest.created_at.desc(), ShiftSwapRequest.id.desc())
    )
    return list(result.scalars().all())


async def list_pending_requests(db: AsyncSession, viewer) -> List[ShiftSwapRequest]:
    if viewer.role not in (Role.ADMIN, Role.EXECUTIVE):
        raise AuthorizationDenied("Admin access required")
    result = await db.execute(
        select(ShiftSwapRequest)
        .where(ShiftSwapRequest.status == SwapStatus.PENDING_APPROVAL.value)
        .order_by(ShiftSwapRequest.updated_at.desc(), ShiftSwapRequest.id.desc())
    )
    return list(result.scalars().all())


async def list_my_requests(db: AsyncSession, viewer, limit: int = 5) -> List[ShiftSwapRequest]:
    result = await db.execute(
        select(ShiftSwapRequest)
        .where(or_(ShiftSwapRequest.requester_id == viewer.id, ShiftSwapRequest.claimant_id == viewer.id))
        .order_by(ShiftSwapRequest.updated_at.desc(), ShiftSwapRequest.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
