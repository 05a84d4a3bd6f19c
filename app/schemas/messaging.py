from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, model_validator

from app.models.enums import RequestStatus


class ChannelCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_private: bool = False
    members: List[UUID] = []


class MessageSend(BaseModel):
    content: str = Field(min_length=1)
    channel_id: Optional[UUID] = None
    dm_id: Optional[UUID] = None

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.channel_id is None) == (self.dm_id is None):
            raise ValueError("Provide exactly one of channel_id or dm_id")
        return self


class DMRequest(BaseModel):
    recipient_id: UUID


class DMStatusUpdate(BaseModel):
    status: RequestStatus

    @model_validator(mode="after")
    def not_pending(self):
        if self.status == RequestStatus.Pending:
            raise ValueError("status must be 'accepted' or 'rejected'")
        return self
