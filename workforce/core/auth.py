# workforce/core/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from workforce.database import get_db
from workforce.models.user import User
from workforce.config import settings
from workforce.core.enums import Role

reusable_oauth2 = HTTPBearer()
optional_oauth2 = HTTPBearer(auto_error=False)


async def _load_user(db: AsyncSession, raw_token: str) -> Optional[User]:
    try:
        payload = jwt.decode(raw_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    # QR tokens are signed with the same key but never carry a subject
    user_id = payload.get("sub")
    if user_id is None:
        return None
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(reusable_oauth2)
):
    user = await _load_user(db, token.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    db: AsyncSession = Depends(get_db),
    token: Optional[HTTPAuthorizationCredentials] = Depends(optional_oauth2)
):
    """Resolve the caller if a valid bearer token was sent, else None (anonymous)."""
    if token is None:
        return None
    return await _load_user(db, token.credentials)


async def get_current_admin(
    current_user = Depends(get_current_user)
):
    if current_user.role != Role.ADMIN:
        raise HTTPException(403, "Admin access required")
    return current_user
