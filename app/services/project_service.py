# app/services/project_service.py

import uuid
from datetime import datetime, timezone

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.policy import Role
from app.models.enums import ProjectStatus
from app.models.project import Project, ProjectMember
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectReview


async def create_project(session: AsyncSession, data: ProjectCreate, creator_id: uuid.UUID) -> Project:
    project = Project(
        **data.model_dump(),
        creator_id=creator_id,
        status=ProjectStatus.Open.value,
        current_members=1,
    )
    session.add(project)
    await session.flush()

    session.add(ProjectMember(project_id=project.id, user_id=creator_id, role="creator"))
    await session.commit()
    await session.refresh(project)
    return project


async def list_projects(session: AsyncSession, status: ProjectStatus | None = None) -> list[Project]:
    query = select(Project).order_by(Project.created_at.desc())
    if status:
        query = query.where(Project.status == status.value)
    result = await session.execute(query)
    return result.scalars().all()


async def list_my_projects(session: AsyncSession, user_id: uuid.UUID) -> list[Project]:
    result = await session.execute(
        select(Project)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .where(ProjectMember.user_id == user_id)
        .order_by(Project.created_at.desc())
    )
    return result.scalars().all()


async def get_project(session: AsyncSession, project_id: uuid.UUID) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise LookupError("Project not found")
    return project


async def list_members(session: AsyncSession, project_id: uuid.UUID) -> list[ProjectMember]:
    result = await session.execute(
        select(ProjectMember).where(ProjectMember.project_id == project_id).order_by(ProjectMember.joined_at)
    )
    return result.scalars().all()


async def join_project(session: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID) -> ProjectMember:
    project = await get_project(session, project_id)

    if project.status != ProjectStatus.Open.value:
        raise ValueError("Project is not open for joining")

    existing = await session.execute(
        select(ProjectMember).where(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
    )
    if existing.scalar_one_or_none():
        raise ValueError("Already a member of this project")

    if project.current_members >= project.max_members:
        raise ValueError("Project is full")

    member = ProjectMember(project_id=project_id, user_id=user_id)
    project.current_members += 1
    project.updated_at = datetime.now(timezone.utc)

    session.add(member)
    session.add(project)
    await session.commit()
    await session.refresh(member)
    return member


async def review_project(session: AsyncSession, project_id: uuid.UUID, data: ProjectReview) -> Project:
    project = await get_project(session, project_id)

    if data.guide_id:
        guide = await session.get(User, data.guide_id)
        if not guide or guide.role not in (Role.Faculty, Role.Admin):
            raise ValueError("Guide must be a faculty member")
        project.guide_id = data.guide_id

    project.status = data.status.value
    project.updated_at = datetime.now(timezone.utc)
    session.add(project)
    await session.commit()
    await session.refresh(project)
    return project
