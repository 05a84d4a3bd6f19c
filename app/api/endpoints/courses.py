# app/api/endpoints/courses.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from typing import List
from uuid import UUID

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.course import Course
from app.models.user import User
from app.schemas.course import CourseCreate

router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("/", response_model=List[Course])
async def list_courses(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(select(Course).order_by(Course.created_at.desc()))
    return result.scalars().all()


@router.post("/", response_model=Course, status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("create_course"))
):
    course = Course(**data.model_dump(), created_by=current_user.id)
    session.add(course)
    await session.commit()
    await session.refresh(course)
    return course


@router.delete("/{course_id}")
async def delete_course(
    course_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("delete_course"))
):
    course = await session.get(Course, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    await session.delete(course)
    await session.commit()
    return {"detail": "Course deleted"}
