from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from workforce.database import get_db
from workforce.core.auth import get_current_user, get_current_admin
from workforce.schemas.swap import SwapRequestCreate, SwapRequestResponse
from workforce.services import marketplace


router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("/swaps", response_model=SwapRequestResponse)
async def create_swap_request(
    swap_in: SwapRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await marketplace.create_swap_request(db, current_user, swap_in.shift_id, swap_in.reason)


@router.get("/marketplace", response_model=List[SwapRequestResponse])
async def get_marketplace(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await marketplace.list_open_requests(db, current_user)


@router.get("/swaps/mine", response_model=List[SwapRequestResponse])
async def get_my_swap_requests(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await marketplace.list_my_requests(db, current_user)


@router.get("/swaps/pending", response_model=List[SwapRequestResponse])
async def get_pending_swap_requests(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    # Executives may look, only admins may decide
    return await marketplace.list_pending_requests(db, current_user)


@router.post("/swaps/{request_id}/claim", response_model=SwapRequestResponse)
async def claim_swap_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await marketplace.claim_swap_request(db, request_id, current_user)


@router.post("/swaps/{request_id}/approve", response_model=SwapRequestResponse)
async def approve_swap_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await marketplace.approve_swap_request(db, admin, request_id)


@router.post("/swaps/{request_id}/reject", response_model=SwapRequestResponse)
async def reject_swap_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await marketplace.reject_swap_request(db, admin, request_id)
