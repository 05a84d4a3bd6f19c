from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone


class Course(SQLModel, table=True):
    __tablename__ = "courses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    instructor: Optional[str] = None
    link: Optional[str] = None
    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
