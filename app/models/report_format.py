from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone


class ReportFormat(SQLModel, table=True):
    __tablename__ = "report_formats"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    academic_year: Optional[str] = None
    file_url: str
    file_name: Optional[str] = None
    # At most one format is active at a time
    is_active: bool = Field(default=False, index=True)
    uploaded_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
