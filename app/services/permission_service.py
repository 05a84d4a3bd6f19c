# app/services/permission_service.py

import uuid
from datetime import datetime, timezone

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.policy import Role
from app.models.enums import PermissionStatus
from app.models.permission import PermissionRequest
from app.models.user import User
from app.schemas.permission import PermissionCreate, PermissionUpdate


async def create_request(session: AsyncSession, data: PermissionCreate, requester_id: uuid.UUID) -> PermissionRequest:
    request = PermissionRequest(**data.model_dump(), requester_id=requester_id)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def list_requests(session: AsyncSession, requester_id: uuid.UUID | None = None) -> list[PermissionRequest]:
    query = select(PermissionRequest).order_by(PermissionRequest.created_at.desc())
    if requester_id:
        query = query.where(PermissionRequest.requester_id == requester_id)
    result = await session.execute(query)
    return result.scalars().all()


async def get_request(session: AsyncSession, request_id: uuid.UUID) -> PermissionRequest:
    request = await session.get(PermissionRequest, request_id)
    if not request:
        raise LookupError("Permission request not found")
    return request


async def _check_guide(session: AsyncSession, guide_id: uuid.UUID) -> None:
    guide = await session.get(User, guide_id)
    if not guide or guide.role not in (Role.Faculty, Role.Admin):
        raise ValueError("Guide must be a faculty member")


async def respond(session: AsyncSession, request_id: uuid.UUID, data: PermissionUpdate, handler_id: uuid.UUID) -> PermissionRequest:
    request = await get_request(session, request_id)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise ValueError("Nothing to update")

    if changes.get("assigned_guide"):
        await _check_guide(session, changes["assigned_guide"])

    if "status" in changes and changes["status"] is not None:
        changes["status"] = changes["status"].value

    for key, value in changes.items():
        setattr(request, key, value)

    request.handled_by = handler_id
    request.updated_at = datetime.now(timezone.utc)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def assign_guide(session: AsyncSession, request_id: uuid.UUID, guide_id: uuid.UUID, handler_id: uuid.UUID) -> PermissionRequest:
    request = await get_request(session, request_id)
    await _check_guide(session, guide_id)

    request.assigned_guide = guide_id
    request.status = PermissionStatus.Approved.value
    request.handled_by = handler_id
    request.updated_at = datetime.now(timezone.utc)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def notification_data(session: AsyncSession, request: PermissionRequest, handler: User) -> dict:
    """Payload for ``send_permission_update_email``."""
    requester = await session.get(User, request.requester_id)
    return {
        "email": requester.email if requester else None,
        "name": (requester.full_name or requester.username) if requester else None,
        "subject": request.subject,
        "status": request.status,
        "response": request.response,
        "handler": handler.full_name or handler.username,
    }
