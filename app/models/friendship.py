from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, UniqueConstraint
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional

from app.models.enums import RequestStatus


class FriendRequest(SQLModel, table=True):
    __tablename__ = "friend_requests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    sender_id: UUID = Field(foreign_key="users.id", index=True)
    receiver_id: UUID = Field(foreign_key="users.id", index=True)
    status: str = Field(default=RequestStatus.Pending.value)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))


class Friendship(SQLModel, table=True):
    """Undirected edge, stored with user1_id < user2_id."""
    __tablename__ = "friendships"
    __table_args__ = (UniqueConstraint("user1_id", "user2_id", name="uq_friendship_pair"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user1_id: UUID = Field(foreign_key="users.id", index=True)
    user2_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
