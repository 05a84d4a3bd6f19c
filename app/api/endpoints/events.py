# app/api/endpoints/events.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select
from typing import List
from uuid import UUID
from loguru import logger

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.enums import EventStatus
from app.models.event import Event
from app.models.user import User
from app.schemas.event import EventCreate, EventUpdate

router = APIRouter(prefix="/api/events", tags=["Events"])


async def _get_event(session: AsyncSession, event_id: UUID) -> Event:
    event = await session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/", response_model=List[Event])
async def list_events(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(select(Event).order_by(Event.event_date.asc()))
    return result.scalars().all()


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: UUID, session: AsyncSession = Depends(get_db_session)):
    return await _get_event(session, event_id)


# New events start unapproved and wait for the committee chair
@router.post("/", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("create_event"))
):
    event = Event(
        **data.model_dump(),
        created_by=current_user.id,
        approved_by_chair=False,
        status=EventStatus.Pending.value,
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: UUID,
    data: EventUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("update_event"))
):
    event = await _get_event(session, event_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(event, key, value)

    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@router.post("/{event_id}/approve", response_model=Event)
async def approve_event(
    event_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(Authorize("approve_event"))
):
    event = await _get_event(session, event_id)
    if event.approved_by_chair:
        raise HTTPException(status_code=400, detail="Event already approved")

    event.approved_by_chair = True
    event.status = EventStatus.Upcoming.value

    session.add(event)
    await session.commit()
    await session.refresh(event)
    logger.info(f"Event '{event.title}' approved by {current_user.username}")
    return event


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(Authorize("delete_event"))
):
    event = await _get_event(session, event_id)
    await session.delete(event)
    await session.commit()
    return {"detail": "Event deleted"}
