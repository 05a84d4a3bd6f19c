from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone

from app.models.enums import PermissionStatus


class PermissionRequest(SQLModel, table=True):
    __tablename__ = "permission_requests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    requester_id: UUID = Field(foreign_key="users.id", index=True)

    request_type: str
    subject: str
    description: str = Field(sa_column=Column(Text, nullable=False))

    status: str = Field(default=PermissionStatus.Pending.value)
    response: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    assigned_guide: Optional[UUID] = Field(default=None, foreign_key="users.id")
    handled_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
