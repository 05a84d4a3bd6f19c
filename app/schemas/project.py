from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.enums import ProjectStatus


class ProjectCreate(BaseModel):
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    domain: Optional[str] = None
    technologies: List[str] = []
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    max_members: int = Field(default=5, ge=1)


class ProjectReview(BaseModel):
    status: ProjectStatus
    guide_id: Optional[UUID] = None
