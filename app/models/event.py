from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone

from app.models.enums import EventStatus


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    event_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), index=True)
    )
    location: Optional[str] = None
    image_url: Optional[str] = None

    # New events wait for the committee chair
    approved_by_chair: bool = Field(default=False)
    status: str = Field(default=EventStatus.Pending.value)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
