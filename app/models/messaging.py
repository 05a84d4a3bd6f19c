from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON, Text
from typing import List, Optional
from uuid import UUID, uuid4
from datetime import datetime, timezone

from app.models.enums import RequestStatus


class Channel(SQLModel, table=True):
    __tablename__ = "channels"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True, unique=True)
    description: Optional[str] = None
    is_private: bool = Field(default=False)
    # user ids (as strings) allowed into a private channel
    members: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class DirectConversation(SQLModel, table=True):
    """A DM thread. user1 asked, user2 accepts or rejects."""
    __tablename__ = "direct_conversations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user1_id: UUID = Field(foreign_key="users.id", index=True)
    user2_id: UUID = Field(foreign_key="users.id", index=True)
    status: str = Field(default=RequestStatus.Pending.value)

    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    user1_unread: int = Field(default=0)
    user2_unread: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    sender_id: UUID = Field(foreign_key="users.id")
    content: str = Field(sa_column=Column(Text, nullable=False))

    # exactly one of these is set
    channel_id: Optional[UUID] = Field(default=None, foreign_key="channels.id", index=True)
    dm_id: Optional[UUID] = Field(default=None, foreign_key="direct_conversations.id", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
