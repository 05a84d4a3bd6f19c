from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone

from app.models.enums import QueryStatus


class MemberQuery(SQLModel, table=True):
    __tablename__ = "queries"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    query: str = Field(sa_column=Column(Text, nullable=False))

    status: str = Field(default=QueryStatus.Pending.value)
    response: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    assigned_to: Optional[UUID] = Field(default=None, foreign_key="users.id")
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
