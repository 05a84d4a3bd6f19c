# app/services/message_service.py

import re
import uuid
from datetime import datetime, timezone

from sqlmodel import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.messaging import Channel, DirectConversation, Message
from app.models.user import User
from app.schemas.messaging import ChannelCreate

HISTORY_LIMIT = 100


def slugify_channel_name(name: str) -> str:
    """``"General Chat!"`` -> ``"general-chat"``."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    if not slug:
        raise ValueError("Channel name must contain letters or digits")
    return slug


def message_event(message: Message) -> dict:
    """Payload pushed to chat relay listeners."""
    return {
        "type": "message",
        "id": str(message.id),
        "sender_id": str(message.sender_id),
        "content": message.content,
        "channel_id": str(message.channel_id) if message.channel_id else None,
        "dm_id": str(message.dm_id) if message.dm_id else None,
        "created_at": message.created_at.isoformat(),
    }


# ============================================================================
# CHANNELS
# ============================================================================
def can_access_channel(channel: Channel, user_id: uuid.UUID) -> bool:
    return not channel.is_private or str(user_id) in (channel.members or [])


async def list_channels_for_user(session: AsyncSession, user_id: uuid.UUID) -> list[Channel]:
    result = await session.execute(select(Channel).order_by(Channel.name))
    return [c for c in result.scalars().all() if can_access_channel(c, user_id)]


async def create_channel(session: AsyncSession, data: ChannelCreate, creator_id: uuid.UUID) -> Channel:
    name = slugify_channel_name(data.name)

    existing = await session.execute(select(Channel).where(Channel.name == name))
    if existing.scalar_one_or_none():
        raise ValueError(f"Channel '{name}' already exists")

    members = {str(m) for m in data.members}
    members.add(str(creator_id))

    channel = Channel(
        name=name,
        description=data.description,
        is_private=data.is_private,
        members=sorted(members),
        created_by=creator_id,
    )
    session.add(channel)
    await session.commit()
    await session.refresh(channel)
    return channel


async def get_accessible_channel(session: AsyncSession, channel_id: uuid.UUID, user_id: uuid.UUID) -> Channel:
    channel = await session.get(Channel, channel_id)
    if not channel:
        raise LookupError("Channel not found")
    if not can_access_channel(channel, user_id):
        raise PermissionError("Not a member of this channel")
    return channel


async def channel_history(session: AsyncSession, channel_id: uuid.UUID, user_id: uuid.UUID) -> list[Message]:
    await get_accessible_channel(session, channel_id, user_id)

    result = await session.execute(
        select(Message)
        .where(Message.channel_id == channel_id)
        .order_by(Message.created_at.desc())
        .limit(HISTORY_LIMIT)
    )
    # Oldest first for display
    return list(reversed(result.scalars().all()))


# ============================================================================
# DIRECT MESSAGES
# ============================================================================
def is_participant(dm: DirectConversation, user_id: uuid.UUID) -> bool:
    return user_id in (dm.user1_id, dm.user2_id)


async def request_dm(session: AsyncSession, requester_id: uuid.UUID, recipient_id: uuid.UUID) -> DirectConversation:
    if requester_id == recipient_id:
        raise ValueError("Cannot message yourself")

    recipient = await session.get(User, recipient_id)
    if not recipient:
        raise LookupError("Recipient not found")

    result = await session.execute(
        select(DirectConversation).where(
            or_(
                (DirectConversation.user1_id == requester_id) & (DirectConversation.user2_id == recipient_id),
                (DirectConversation.user1_id == recipient_id) & (DirectConversation.user2_id == requester_id),
            )
        )
    )
    existing = result.scalars().first()
    if existing and existing.status != RequestStatus.Rejected.value:
        raise ValueError("Conversation already exists")

    if existing:
        # A rejected thread can be asked for again
        existing.user1_id = requester_id
        existing.user2_id = recipient_id
        existing.status = RequestStatus.Pending.value
        existing.updated_at = datetime.now(timezone.utc)
        dm = existing
    else:
        dm = DirectConversation(user1_id=requester_id, user2_id=recipient_id)

    session.add(dm)
    await session.commit()
    await session.refresh(dm)
    return dm


async def respond_dm(session: AsyncSession, dm_id: uuid.UUID, user_id: uuid.UUID, status: RequestStatus) -> DirectConversation:
    dm = await session.get(DirectConversation, dm_id)
    if not dm:
        raise LookupError("Conversation not found")
    if dm.user2_id != user_id:
        raise PermissionError("Only the recipient can respond to this request")
    if dm.status != RequestStatus.Pending.value:
        raise ValueError(f"Request already {dm.status}")

    dm.status = status.value
    dm.updated_at = datetime.now(timezone.utc)
    session.add(dm)
    await session.commit()
    await session.refresh(dm)
    return dm


async def list_dms(session: AsyncSession, user_id: uuid.UUID, status: RequestStatus = RequestStatus.Accepted) -> list[DirectConversation]:
    result = await session.execute(
        select(DirectConversation)
        .where(
            or_(DirectConversation.user1_id == user_id, DirectConversation.user2_id == user_id),
            DirectConversation.status == status.value,
        )
        .order_by(DirectConversation.created_at.desc())
    )
    return result.scalars().all()


async def dm_history(session: AsyncSession, dm_id: uuid.UUID, user_id: uuid.UUID) -> list[Message]:
    dm = await session.get(DirectConversation, dm_id)
    if not dm:
        raise LookupError("Conversation not found")
    if not is_participant(dm, user_id):
        raise PermissionError("Not a participant of this conversation")

    # Reading clears the reader's unread counter
    if dm.user1_id == user_id:
        dm.user1_unread = 0
    else:
        dm.user2_unread = 0
    session.add(dm)
    await session.commit()

    result = await session.execute(
        select(Message)
        .where(Message.dm_id == dm_id)
        .order_by(Message.created_at.desc())
        .limit(HISTORY_LIMIT)
    )
    return list(reversed(result.scalars().all()))


# ============================================================================
# SEND (shared by REST and websocket)
# ============================================================================
async def send_channel_message(session: AsyncSession, channel_id: uuid.UUID, sender_id: uuid.UUID, content: str) -> Message:
    await get_accessible_channel(session, channel_id, sender_id)

    message = Message(sender_id=sender_id, channel_id=channel_id, content=content)
    session.add(message)
    await session.commit()
    await session.refresh(message)
    return message


async def get_open_dm(session: AsyncSession, dm_id: uuid.UUID, user_id: uuid.UUID) -> DirectConversation:
    """An accepted conversation the user takes part in."""
    dm = await session.get(DirectConversation, dm_id)
    if not dm:
        raise LookupError("Conversation not found")
    if not is_participant(dm, user_id):
        raise PermissionError("Not a participant of this conversation")
    if dm.status != RequestStatus.Accepted.value:
        raise ValueError("Conversation has not been accepted")
    return dm


async def send_dm_message(session: AsyncSession, dm_id: uuid.UUID, sender_id: uuid.UUID, content: str) -> Message:
    dm = await get_open_dm(session, dm_id, sender_id)

    message = Message(sender_id=sender_id, dm_id=dm_id, content=content)
    session.add(message)

    dm.last_message = content
    dm.last_message_at = message.created_at
    if dm.user1_id == sender_id:
        dm.user2_unread += 1
    else:
        dm.user1_unread += 1
    session.add(dm)

    await session.commit()
    await session.refresh(message)
    return message


def room_for(message: Message) -> str:
    return str(message.channel_id or message.dm_id)


async def delete_own_message(session: AsyncSession, message_id: uuid.UUID, user_id: uuid.UUID) -> Message:
    message = await session.get(Message, message_id)
    # Someone else's message looks the same as a missing one
    if not message or message.sender_id != user_id:
        raise LookupError("Message not found")

    await session.delete(message)
    await session.commit()
    return message


def message_deleted_event(message: Message) -> dict:
    return {"type": "message-deleted", "id": str(message.id)}
