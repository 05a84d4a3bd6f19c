# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession
from loguru import logger

from app.api.deps import get_db_session, get_current_user
from app.core.policy import Role
from app.core.rate_limiter import limiter
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, RegisterResponse, TokenWithUser
from app.schemas.user import UserRead
from app.services.auth_service import authenticate_user, create_login_response, create_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# REGISTER (self-service accounts are always students)
# -------------------------------------------------------------------
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(
    request: Request,
    data: RegisterRequest,
    session: AsyncSession = Depends(get_db_session)
):
    try:
        user = await create_user(
            session,
            username=data.username.strip(),
            password=data.password,
            role=Role.Student,
            email=data.email,
            full_name=data.full_name,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"New student registered: {user.username}")
    return RegisterResponse(message="Registration successful", user_id=str(user.id))


# -------------------------------------------------------------------
# LOGIN (username or email)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit("10/minute")
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    user = await authenticate_user(session, payload.username, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return create_login_response(user)


# -------------------------------------------------------------------
# VERIFY TOKEN (returns the fresh user row)
# -------------------------------------------------------------------
@router.get("/verify", response_model=UserRead)
async def verify(current_user: User = Depends(get_current_user)):
    return current_user


# -------------------------------------------------------------------
# LOGOUT (tokens are stateless; the client drops it)
# -------------------------------------------------------------------
@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    return {"detail": "Logged out"}
