# app/services/user_service.py

from datetime import date, datetime, timezone
import uuid

from sqlmodel import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.policy import Role
from app.models.course import Course
from app.models.enums import COMMITTEE_POST_ORDER
from app.models.user import User
from app.schemas.user import (
    AdminFacultyCreate,
    AdminStudentCreate,
    UserProfileUpdate,
    UserRoleUpdate,
)
from app.services.auth_service import create_user, get_user_by_email


def build_student_username(surname: str, dob: date) -> str:
    """Surname followed by the date of birth as ddmmyy, e.g. ``rao010204``."""
    return f"{surname.strip().lower()}{dob.strftime('%d%m%y')}"


def build_faculty_username(email: str) -> str:
    return email.strip().lower()


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at.desc()))
    return result.scalars().all()


def post_rank(post: str | None) -> int:
    try:
        return COMMITTEE_POST_ORDER.index(post)
    except ValueError:
        return len(COMMITTEE_POST_ORDER)


async def list_committee(session: AsyncSession) -> list[User]:
    """Committee members by post importance, oldest accounts first within a post."""
    result = await session.execute(
        select(User).where(User.is_committee == True).order_by(User.created_at.asc())  # noqa: E712
    )
    return sorted(result.scalars().all(), key=lambda u: post_rank(u.committee_post))


async def update_profile(session: AsyncSession, user: User, data: UserProfileUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        existing = await get_user_by_email(session, new_email)
        if existing and existing.id != user.id:
            raise ValueError("Email already in use")

    for key, value in changes.items():
        setattr(user, key, value)
    user.updated_at = datetime.now(timezone.utc)

    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def update_role(session: AsyncSession, user: User, data: UserRoleUpdate) -> tuple[User, dict]:
    changes = data.model_dump(exclude_unset=True)
    old_values = {key: getattr(user, key) for key in changes}

    for key, value in changes.items():
        setattr(user, key, value)

    # Leaving the committee clears the committee attributes with it
    if changes.get("is_committee") is False:
        user.committee_role = None
        user.committee_post = None
        user.managed_department = None

    user.updated_at = datetime.now(timezone.utc)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user, old_values


async def delete_user(session: AsyncSession, user_id: uuid.UUID) -> None:
    user = await session.get(User, user_id)
    if not user:
        raise LookupError("User not found")

    await session.delete(user)
    await session.commit()


async def add_student(session: AsyncSession, data: AdminStudentCreate) -> User:
    return await create_user(
        session,
        username=build_student_username(data.surname, data.dob),
        password=data.password,
        role=Role.Student,
        email=data.email,
        full_name=data.full_name,
        department=data.department,
        year=data.year,
        roll_number=data.roll_number,
    )


async def add_faculty(session: AsyncSession, data: AdminFacultyCreate) -> User:
    return await create_user(
        session,
        username=build_faculty_username(data.email),
        password=data.password,
        role=Role.Faculty,
        email=data.email,
        full_name=data.full_name,
        department=data.department,
    )


async def dashboard_counts(session: AsyncSession) -> dict:
    total_users = await session.scalar(select(func.count()).select_from(User))
    students = await session.scalar(
        select(func.count()).select_from(User).where(User.role == Role.Student)
    )
    total_courses = await session.scalar(select(func.count()).select_from(Course))

    return {
        "total_users": total_users or 0,
        "students": students or 0,
        "total_courses": total_courses or 0,
    }


# ============================================================================
# DEPARTMENTS
# ============================================================================
async def list_department_students(session: AsyncSession, department: str) -> list[User]:
    result = await session.execute(
        select(User)
        .where(User.department == department, User.role == Role.Student)
        .order_by(User.year.asc())
    )
    return result.scalars().all()


async def department_stats(session: AsyncSession, department: str) -> dict:
    result = await session.execute(
        select(User.year, func.count(User.id))
        .where(User.department == department, User.role == Role.Student)
        .group_by(User.year)
    )
    breakdown = {str(year): count for year, count in result.all()}

    return {
        "department": department,
        "total_students": sum(breakdown.values()),
        "year_breakdown": breakdown,
    }


async def update_department_student(
    session: AsyncSession,
    department: str,
    student_id: uuid.UUID,
    year: int | None,
    roll_number: str | None,
) -> User:
    result = await session.execute(
        select(User).where(User.id == student_id, User.department == department)
    )
    student = result.scalar_one_or_none()
    if not student:
        raise LookupError("Student not found in this department")

    if year is not None:
        student.year = year
    if roll_number:
        student.roll_number = roll_number
    student.updated_at = datetime.now(timezone.utc)

    session.add(student)
    await session.commit()
    await session.refresh(student)
    return student
