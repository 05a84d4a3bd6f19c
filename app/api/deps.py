# app/api/deps.py

from typing import AsyncGenerator, Optional
import uuid

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.security import decode_token
from app.models.user import User
from app.services.auth_service import get_user_by_id


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Resolve a user from a raw token (shared by HTTP and websocket)
# ------------------------------------------------------------
async def user_from_token(session: AsyncSession, token: str) -> User:
    try:
        payload = decode_token(token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token expired")
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")

    # Fresh lookup: role and flags are never taken from the token
    user = await get_user_by_id(session, user_id)
    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")

    return user


# ------------------------------------------------------------
# Get current logged-in user from JWT
# ------------------------------------------------------------
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "No token provided")

    return await user_from_token(session, credentials.credentials)


