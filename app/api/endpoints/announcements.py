# app/api/endpoints/announcements.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from typing import List
from uuid import UUID

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.announcement import Announcement
from app.models.user import User
from app.schemas.announcement import AnnouncementCreate

router = APIRouter(prefix="/api/announcements", tags=["Announcements"])


@router.get("/", response_model=List[Announcement])
async def list_announcements(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(select(Announcement).order_by(Announcement.created_at.desc()))
    return result.scalars().all()


@router.post("/", response_model=Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("post_announcement"))
):
    announcement = Announcement(**data.model_dump(), author_id=current_user.id)
    session.add(announcement)
    await session.commit()
    await session.refresh(announcement)
    return announcement


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("delete_announcement"))
):
    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    await session.delete(announcement)
    await session.commit()
    return {"detail": "Announcement deleted"}
