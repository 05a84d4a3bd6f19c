from uuid import UUID
from pydantic import BaseModel


class FriendRequestCreate(BaseModel):
    receiver_id: UUID
