# app/api/endpoints/permissions.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session, get_current_user
from app.core.rbac import Authorize
from app.models.permission import PermissionRequest
from app.models.user import User
from app.schemas.permission import AssignGuideRequest, PermissionCreate, PermissionUpdate
from app.services.email_service import send_permission_update_email
from app.services import permission_service

router = APIRouter(
    prefix="/api/permissions",
    tags=["Permission Requests"]
)


# ----------------------------------------------------------
# 1. Create (any signed-in member)
# ----------------------------------------------------------
@router.post("/", response_model=PermissionRequest, status_code=status.HTTP_201_CREATED)
async def create_permission_request(
    data: PermissionCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await permission_service.create_request(session, data, current_user.id)


# ----------------------------------------------------------
# 2. My requests
# ----------------------------------------------------------
@router.get("/my", response_model=List[PermissionRequest])
async def my_permission_requests(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await permission_service.list_requests(session, requester_id=current_user.id)


# ----------------------------------------------------------
# 3. All requests (committee reviewers)
# ----------------------------------------------------------
@router.get("/", response_model=List[PermissionRequest])
async def list_permission_requests(
    _: User = Depends(Authorize("view_permissions")),
    session: AsyncSession = Depends(get_db_session)
):
    return await permission_service.list_requests(session)


# ----------------------------------------------------------
# 4. Respond (status / response / guide), requester gets an email
# ----------------------------------------------------------
@router.put("/{request_id}", response_model=PermissionRequest)
async def respond_permission_request(
    request_id: UUID,
    data: PermissionUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(Authorize("respond_permission")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        request = await permission_service.respond(session, request_id, data, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))

    payload = await permission_service.notification_data(session, request, current_user)
    background_tasks.add_task(send_permission_update_email, payload)
    return request


# ----------------------------------------------------------
# 5. Assign a faculty guide (approves the request)
# ----------------------------------------------------------
@router.post("/{request_id}/assign-guide", response_model=PermissionRequest)
async def assign_guide(
    request_id: UUID,
    data: AssignGuideRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(Authorize("respond_permission")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        request = await permission_service.assign_guide(session, request_id, data.guide_id, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))

    payload = await permission_service.notification_data(session, request, current_user)
    background_tasks.add_task(send_permission_update_email, payload)
    return request
