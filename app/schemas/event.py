from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, field_validator


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive input is taken as UTC; the column stores aware timestamps
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EventCreate(BaseModel):
    title: str
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def event_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def event_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)
