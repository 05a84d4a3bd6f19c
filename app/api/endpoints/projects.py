# app/api/endpoints/projects.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, get_current_user
from app.core.rbac import Authorize
from app.models.enums import ProjectStatus
from app.models.project import Project, ProjectMember
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectReview
from app.services import project_service

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await project_service.create_project(session, data, current_user.id)


@router.get("/", response_model=List[Project])
async def list_projects(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
    status: Optional[ProjectStatus] = Query(None, description="Filter by project status")
):
    return await project_service.list_projects(session, status)


@router.get("/my", response_model=List[Project])
async def my_projects(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await project_service.list_my_projects(session, current_user.id)


@router.get("/{project_id}/members", response_model=List[ProjectMember])
async def project_members(
    project_id: UUID,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        await project_service.get_project(session, project_id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    return await project_service.list_members(session, project_id)


@router.post("/{project_id}/join", response_model=ProjectMember)
async def join_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await project_service.join_project(session, project_id, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))


# Faculty review: approve / reject / complete and assign a guide
@router.put("/{project_id}/review", response_model=Project)
async def review_project(
    project_id: UUID,
    data: ProjectReview,
    _: User = Depends(Authorize("review_project")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await project_service.review_project(session, project_id, data)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
