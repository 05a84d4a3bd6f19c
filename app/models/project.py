from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON, Text
from typing import List, Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone

from app.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    domain: Optional[str] = None
    technologies: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None

    max_members: int = Field(default=5)
    # Creator counts as the first member
    current_members: int = Field(default=1)

    status: str = Field(default=ProjectStatus.Open.value, index=True)
    creator_id: UUID = Field(foreign_key="users.id")
    guide_id: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))


class ProjectMember(SQLModel, table=True):
    __tablename__ = "project_members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    role: str = Field(default="member")  # "creator" | "member"
    progress: int = Field(default=0)
    joined_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
