from typing import Optional
from fastapi import APIRouter, Depends
from workforce.config import settings
from workforce.core.auth import get_current_admin, get_current_user
from workforce.schemas.qr import OfficeQRRequest, QRTokenResponse
from workforce.services import tokens


router = APIRouter(prefix="/qr", tags=["qr"])


@router.post("/office", response_model=QRTokenResponse)
async def generate_office_qr(
    qr_in: Optional[OfficeQRRequest] = None,
    admin = Depends(get_current_admin)
):
    """Called by the front desk screen every OFFICE_QR_REFRESH_SECONDS."""
    location = qr_in.location if qr_in else None
    token = tokens.issue_office_token(location)
    return QRTokenResponse(
        token=token,
        expires_at=tokens.expiry_of(token),
        refresh_interval_seconds=settings.OFFICE_QR_REFRESH_SECONDS,
    )


@router.get("/me", response_model=QRTokenResponse)
async def generate_badge_qr(current_user = Depends(get_current_user)):
    token = tokens.issue_user_token(current_user.id)
    return QRTokenResponse(token=token, expires_at=tokens.expiry_of(token))
