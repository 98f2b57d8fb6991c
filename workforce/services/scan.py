"""Classifies a scanned QR payload and decides whose attendance it records.

Two directions are supported:

* badge scan: an admin's device scans an employee's personal QR
  (``USER:<id>`` legacy text or a signed ``USER_QR`` token);
* office scan: an employee scans the rotating ``OFFICE_QR`` token shown at
  the front desk, subject to geofencing.

An admin's own badge works the other way around: whoever scans it is the one
checked in.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.config import settings
from workforce.core.enums import Role
from workforce.core.exceptions import (
    AuthenticationRequired,
    AuthorizationDenied,
    GeofenceViolation,
    InvalidToken,
    LocationRequired,
    NotFoundError,
)
from workforce.models.user import User
from workforce.schemas.attendance import AttendanceResult
from workforce.schemas.qr import GeoPoint, OfficeQRPayload, UserQRPayload
from workforce.services import tokens
from workforce.services.attendance import record_attendance
from workforce.services.settings import get_company_settings
from workforce.utils.geo import distance_meters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyUserScan:
    user_id: Optional[int]  # None when the text after the prefix is not an id
    kind: Literal["legacy_user"] = "legacy_user"


@dataclass(frozen=True)
class SignedUserScan:
    user_id: int
    kind: Literal["signed_user"] = "signed_user"


@dataclass(frozen=True)
class OfficeScan:
    raw: str
    kind: Literal["office"] = "office"


Scan = Union[LegacyUserScan, SignedUserScan, OfficeScan]


def classify_scan(raw: str) -> Scan:
    """First match wins: legacy prefix, signed user token, office candidate."""
    prefix = settings.LEGACY_USER_QR_PREFIX
    if raw.startswith(prefix):
        try:
            return LegacyUserScan(user_id=int(raw[len(prefix):].strip()))
        except ValueError:
            return LegacyUserScan(user_id=None)

    payload = tokens.verify(raw)
    if isinstance(payload, UserQRPayload):
        return SignedUserScan(user_id=payload.user_id)

    return OfficeScan(raw=raw)


async def _badge_target(db: AsyncSession, actor: Optional[User], scanned_id: Optional[int]) -> int:
    if actor is None:
        raise AuthenticationRequired()

    scanned = await db.get(User, scanned_id) if scanned_id is not None else None
    if scanned is None:
        raise NotFoundError("Employee not found for this badge")

    if scanned.role == Role.ADMIN:
        # Admin badges are scanned by someone else; the scanner is checked in
        return actor.id

    if actor.role != Role.ADMIN:
        raise AuthorizationDenied("Only admins can scan employee badges")
    return scanned.id


def check_geofence(
    reported: Optional[GeoPoint],
    office: GeoPoint,
    radius: float,
) -> None:
    if reported is None:
        raise LocationRequired()
    distance = distance_meters(office.lat, office.lng, reported.lat, reported.lng)
    if distance > radius:
        raise GeofenceViolation(distance=distance, allowed=radius)


async def _verify_office_scan(
    db: AsyncSession, raw: str, location: Optional[GeoPoint]
) -> None:
    payload = tokens.verify(raw)
    if not isinstance(payload, OfficeQRPayload):
        raise InvalidToken()

    company = await get_company_settings(db)
    if company is not None and company.geofence_radius > 0:
        office = GeoPoint(lat=company.office_lat, lng=company.office_lng)
        check_geofence(location, office, company.geofence_radius)
    elif company is None and payload.location is not None and location is not None:
        # No office configured yet: trust the displaying device's position
        check_geofence(location, payload.location, settings.FALLBACK_GEOFENCE_METERS)


async def resolve_scan(
    db: AsyncSession,
    actor: Optional[User],
    raw: str,
    location: Optional[GeoPoint] = None,
    *,
    now: Optional[datetime] = None,
    background_tasks: Optional[BackgroundTasks] = None,
) -> AttendanceResult:
    scan = classify_scan(raw)

    if isinstance(scan, OfficeScan):
        if actor is None:
            raise AuthenticationRequired()
        await _verify_office_scan(db, scan.raw, location)
        target_id = actor.id
    else:
        target_id = await _badge_target(db, actor, scan.user_id)

    logger.debug("Scan %s by %s resolved to user %s", scan.kind, actor.id, target_id)
    return await record_attendance(
        db,
        target_id,
        location=location,
        now=now,
        background_tasks=background_tasks,
    )
