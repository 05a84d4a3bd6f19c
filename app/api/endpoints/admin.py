# app/api/endpoints/admin.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from loguru import logger

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.audit import AuditLog
from app.models.user import User
from app.schemas.user import AdminFacultyCreate, AdminPasswordReset, AdminStudentCreate, UserRead
from app.services.audit_service import audit_kwargs, log_activity
from app.services.auth_service import reset_password
from app.services.email_service import send_welcome_email
from app.services import user_service

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def _welcome_payload(user: User) -> dict:
    return {
        "email": user.email,
        "full_name": user.full_name,
        "username": user.username,
        "role": user.role.value,
    }


# ===================================================================
# DASHBOARD
# ===================================================================
@router.get("/dashboard-stats")
async def dashboard_stats(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("view_dashboard_stats"))
):
    counts = await user_service.dashboard_counts(session)

    logs_res = await session.execute(select(AuditLog).order_by(AuditLog.timestamp.desc()).limit(5))
    counts["recent_activity"] = logs_res.scalars().all()
    return counts


# ===================================================================
# ADD STUDENT / FACULTY
# ===================================================================
@router.post("/students", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def add_student(
    data: AdminStudentCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("manage_users"))
):
    try:
        user = await user_service.add_student(session, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Student {user.username} added by {current_user.username}")
    background_tasks.add_task(send_welcome_email, _welcome_payload(user))
    background_tasks.add_task(
        log_activity,
        action="STUDENT_ADDED",
        resource_type="user",
        resource_id=str(user.id),
        **audit_kwargs(current_user),
    )
    return user


@router.post("/faculty", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def add_faculty(
    data: AdminFacultyCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("manage_users"))
):
    try:
        user = await user_service.add_faculty(session, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Faculty {user.username} added by {current_user.username}")
    background_tasks.add_task(send_welcome_email, _welcome_payload(user))
    background_tasks.add_task(
        log_activity,
        action="FACULTY_ADDED",
        resource_type="user",
        resource_id=str(user.id),
        **audit_kwargs(current_user),
    )
    return user


# ===================================================================
# RESET PASSWORD
# ===================================================================
@router.post("/reset-password")
async def admin_reset_password(
    payload: AdminPasswordReset,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("manage_users"))
):
    try:
        user = await reset_password(session, payload.username, payload.new_password)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    background_tasks.add_task(
        log_activity,
        action="PASSWORD_RESET",
        resource_type="user",
        resource_id=str(user.id),
        **audit_kwargs(current_user),
    )
    return {"detail": f"Password reset for {user.username}"}
