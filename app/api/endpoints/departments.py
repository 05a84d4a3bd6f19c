# app/api/endpoints/departments.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.enums import DEPARTMENTS
from app.models.user import User
from app.schemas.user import DepartmentStudentUpdate, UserRead
from app.services.user_service import (
    department_stats,
    list_department_students,
    update_department_student,
)

router = APIRouter(
    prefix="/api/departments",
    tags=["Departments"]
)


def _known_department(department: str) -> str:
    if department not in DEPARTMENTS:
        raise HTTPException(404, f"Unknown department '{department}'")
    return department


@router.get("/")
async def get_departments():
    return DEPARTMENTS


# Department names contain "/", hence the :path converter.
# Stats are registered before the catch-all student routes.

# 1. Year-wise stats (any dept head, chair or admin)
@router.get("/{department:path}/stats")
async def get_department_stats(
    department: str,
    _: User = Depends(Authorize("view_department_stats")),
    session: AsyncSession = Depends(get_db_session)
):
    return await department_stats(session, _known_department(department))


# 2. Students of a department (own department only, unless chair/admin)
@router.get("/{department:path}/students", response_model=List[UserRead])
async def get_department_students(
    department: str,
    _: User = Depends(Authorize("view_department_students", scope_param="department")),
    session: AsyncSession = Depends(get_db_session)
):
    return await list_department_students(session, _known_department(department))


# 3. Edit a student's year / roll number
@router.put("/{department:path}/students/{student_id}", response_model=UserRead)
async def edit_department_student(
    department: str,
    student_id: UUID,
    data: DepartmentStudentUpdate,
    _: User = Depends(Authorize("edit_department_student", scope_param="department")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await update_department_student(
            session,
            _known_department(department),
            student_id,
            data.year,
            data.roll_number,
        )
    except LookupError as e:
        raise HTTPException(404, str(e))
