from typing import Optional
from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    instructor: Optional[str] = None
    link: Optional[str] = None
