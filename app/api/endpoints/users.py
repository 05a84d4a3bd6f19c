# app/api/endpoints/users.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session, get_current_user
from app.core.rbac import Authorize, is_allowed
from app.models.user import User
from app.schemas.user import UserRead, UserProfileUpdate, UserRoleUpdate
from app.services.audit_service import audit_kwargs, log_activity
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


def _jsonable(values: dict) -> dict:
    return {k: getattr(v, "value", v) for k, v in values.items()}


# -------------------------------------------------------------------
# List all users
# -------------------------------------------------------------------
@router.get("/", response_model=List[UserRead])
async def list_users(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("manage_users"))
):
    return await user_service.list_users(session)


# -------------------------------------------------------------------
# Current user
# -------------------------------------------------------------------
@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user


# -------------------------------------------------------------------
# Get one user (any signed-in user)
# -------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user)
):
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------------------------------------------------------
# Update profile (self, or a user manager)
# -------------------------------------------------------------------
@router.put("/{user_id}", response_model=UserRead)
async def update_user_profile(
    user_id: UUID,
    data: UserProfileUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user)
):
    if user_id != current_user.id and not is_allowed(current_user, "manage_users"):
        raise HTTPException(status_code=403, detail="You can only edit your own profile")

    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        return await user_service.update_profile(session, user, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -------------------------------------------------------------------
# Update role and committee attributes
# -------------------------------------------------------------------
@router.put("/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("manage_users"))
):
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user, old_values = await user_service.update_role(session, user, data)

    background_tasks.add_task(
        log_activity,
        action="ROLE_CHANGED",
        resource_type="user",
        resource_id=str(user.id),
        details={
            "before": _jsonable(old_values),
            "after": _jsonable(data.model_dump(exclude_unset=True)),
        },
        **audit_kwargs(current_user),
    )
    return user


# -------------------------------------------------------------------
# Delete a user
# -------------------------------------------------------------------
@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("manage_users"))
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    try:
        await user_service.delete_user(session, user_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    background_tasks.add_task(
        log_activity,
        action="USER_DELETED",
        resource_type="user",
        resource_id=str(user_id),
        **audit_kwargs(current_user),
    )
    return {"detail": "User deleted successfully"}
