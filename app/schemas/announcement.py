from pydantic import BaseModel, Field


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    target_audience: str = "all"
