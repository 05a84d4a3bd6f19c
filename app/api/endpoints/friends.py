# app/api/endpoints/friends.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID
from loguru import logger

from app.api.deps import get_db_session, get_current_user
from app.core.rbac import Authorize
from app.models.friendship import FriendRequest, Friendship
from app.models.user import User
from app.schemas.friendship import FriendRequestCreate
from app.schemas.user import UserSummary
from app.services import friendship_service

router = APIRouter(prefix="/api/friends", tags=["Friends"])


@router.get("/directory", response_model=List[UserSummary])
async def member_directory(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await friendship_service.directory(session, current_user.id)


@router.get("/", response_model=List[UserSummary])
async def list_friends(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await friendship_service.list_friends(session, current_user.id)


# -------------------------------------------------------------------
# REQUESTS
# -------------------------------------------------------------------
@router.post("/requests", response_model=FriendRequest, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    data: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await friendship_service.send_request(session, current_user.id, data.receiver_id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.get("/requests/sent", response_model=List[FriendRequest])
async def sent_requests(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await friendship_service.list_requests(session, current_user.id, sent=True)


@router.get("/requests/received", response_model=List[FriendRequest])
async def received_requests(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await friendship_service.list_requests(session, current_user.id, sent=False)


@router.post("/requests/{request_id}/accept", response_model=Friendship)
async def accept_friend_request(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await friendship_service.accept_request(session, request_id, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except PermissionError as e:
        raise HTTPException(403, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.post("/requests/{request_id}/reject", response_model=FriendRequest)
async def reject_friend_request(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await friendship_service.reject_request(session, request_id, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    except PermissionError as e:
        raise HTTPException(403, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))


# -------------------------------------------------------------------
# ADMIN: connect every admin and committee member
# -------------------------------------------------------------------
@router.post("/sync-committee")
async def sync_committee(
    current_user: User = Depends(Authorize("sync_committee_friendships")),
    session: AsyncSession = Depends(get_db_session)
):
    created = await friendship_service.sync_committee_friendships(session)
    logger.info(f"Committee friendship sync by {current_user.username}: {created} created")
    return {"created": created}


@router.delete("/{friend_id}")
async def remove_friend(
    friend_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        await friendship_service.remove_friend(session, current_user.id, friend_id)
    except LookupError as e:
        raise HTTPException(404, str(e))
    return {"detail": "Friend removed"}
