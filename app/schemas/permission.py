from typing import Optional
from uuid import UUID
from pydantic import BaseModel, field_validator

from app.models.enums import PermissionStatus


class PermissionCreate(BaseModel):
    request_type: str
    subject: str
    description: str

    @field_validator("request_type", "subject", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("All fields required")
        return v


class PermissionUpdate(BaseModel):
    status: Optional[PermissionStatus] = None
    assigned_guide: Optional[UUID] = None
    response: Optional[str] = None


class AssignGuideRequest(BaseModel):
    guide_id: UUID
