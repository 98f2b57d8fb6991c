"""Short-lived signed tokens rendered as QR codes.

Tokens are HS256 JWTs. They are self-contained: verification needs only the
signing key, so an unauthenticated scanning device can present them.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import jwt, JWTError
from pydantic import TypeAdapter, ValidationError

from workforce.config import settings
from workforce.schemas.qr import GeoPoint, OfficeQRPayload, QRPayload, UserQRPayload

logger = logging.getLogger(__name__)

_payload_adapter = TypeAdapter(QRPayload)


def issue(
    payload: Union[OfficeQRPayload, UserQRPayload],
    ttl_seconds: int,
    now: Optional[datetime] = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    claims = payload.model_dump(mode="json", exclude_none=True, exclude={"iat", "exp"})
    claims["iat"] = int(issued.timestamp())
    claims["exp"] = int((issued + timedelta(seconds=ttl_seconds)).timestamp())
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify(token) -> Optional[Union[OfficeQRPayload, UserQRPayload]]:
    """Return the typed payload, or None for anything that is not a live QR token."""
    if not isinstance(token, str) or not token:
        return None
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    # jose only checks exp when present; QR tokens must always carry one
    if "exp" not in claims:
        return None
    try:
        return _payload_adapter.validate_python(claims)
    except ValidationError:
        logger.debug("Signed token with unknown payload shape: %s", claims.get("type"))
        return None


def expiry_of(token: str) -> datetime:
    claims = jwt.get_unverified_claims(token)
    return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)


def issue_office_token(location: Optional[GeoPoint] = None, now: Optional[datetime] = None) -> str:
    return issue(OfficeQRPayload(location=location), settings.OFFICE_QR_TTL_SECONDS, now=now)


def issue_user_token(user_id: int, now: Optional[datetime] = None) -> str:
    return issue(UserQRPayload(user_id=user_id), settings.USER_QR_TTL_SECONDS, now=now)
