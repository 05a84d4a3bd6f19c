# app/services/friendship_service.py

import uuid
from datetime import datetime, timezone
from itertools import combinations

from sqlmodel import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.policy import Role
from app.models.enums import RequestStatus
from app.models.friendship import FriendRequest, Friendship
from app.models.user import User


def ordered_pair(a: uuid.UUID, b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    """Friendships are stored once, with the smaller id first."""
    return (a, b) if str(a) < str(b) else (b, a)


async def get_friendship(session: AsyncSession, a: uuid.UUID, b: uuid.UUID) -> Friendship | None:
    user1, user2 = ordered_pair(a, b)
    result = await session.execute(
        select(Friendship).where(Friendship.user1_id == user1, Friendship.user2_id == user2)
    )
    return result.scalar_one_or_none()


async def friend_ids(session: AsyncSession, user_id: uuid.UUID) -> set[uuid.UUID]:
    result = await session.execute(
        select(Friendship).where(or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id))
    )
    return {
        f.user2_id if f.user1_id == user_id else f.user1_id
        for f in result.scalars().all()
    }


async def directory(session: AsyncSession, user_id: uuid.UUID) -> list[User]:
    """Everyone except the caller, alphabetical."""
    result = await session.execute(select(User).where(User.id != user_id).order_by(User.username))
    return result.scalars().all()


# ============================================================================
# REQUESTS
# ============================================================================
async def send_request(session: AsyncSession, sender_id: uuid.UUID, receiver_id: uuid.UUID) -> FriendRequest:
    if sender_id == receiver_id:
        raise ValueError("Cannot send a friend request to yourself")

    if not await session.get(User, receiver_id):
        raise LookupError("User not found")

    if await get_friendship(session, sender_id, receiver_id):
        raise ValueError("Already friends")

    pending = await session.execute(
        select(FriendRequest).where(
            FriendRequest.status == RequestStatus.Pending.value,
            or_(
                (FriendRequest.sender_id == sender_id) & (FriendRequest.receiver_id == receiver_id),
                (FriendRequest.sender_id == receiver_id) & (FriendRequest.receiver_id == sender_id),
            ),
        )
    )
    if pending.scalars().first():
        raise ValueError("Friend request already pending")

    request = FriendRequest(sender_id=sender_id, receiver_id=receiver_id)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


async def list_requests(session: AsyncSession, user_id: uuid.UUID, sent: bool) -> list[FriendRequest]:
    column = FriendRequest.sender_id if sent else FriendRequest.receiver_id
    result = await session.execute(
        select(FriendRequest)
        .where(column == user_id, FriendRequest.status == RequestStatus.Pending.value)
        .order_by(FriendRequest.created_at.desc())
    )
    return result.scalars().all()


async def _pending_for_receiver(session: AsyncSession, request_id: uuid.UUID, user_id: uuid.UUID) -> FriendRequest:
    request = await session.get(FriendRequest, request_id)
    if not request:
        raise LookupError("Friend request not found")
    if request.receiver_id != user_id:
        raise PermissionError("Only the receiver can respond to this request")
    if request.status != RequestStatus.Pending.value:
        raise ValueError(f"Request already {request.status}")
    return request


async def accept_request(session: AsyncSession, request_id: uuid.UUID, user_id: uuid.UUID) -> Friendship:
    request = await _pending_for_receiver(session, request_id, user_id)

    request.status = RequestStatus.Accepted.value
    request.updated_at = datetime.now(timezone.utc)
    session.add(request)

    friendship = await get_friendship(session, request.sender_id, request.receiver_id)
    if not friendship:
        user1, user2 = ordered_pair(request.sender_id, request.receiver_id)
        friendship = Friendship(user1_id=user1, user2_id=user2)
        session.add(friendship)

    await session.commit()
    await session.refresh(friendship)
    return friendship


async def reject_request(session: AsyncSession, request_id: uuid.UUID, user_id: uuid.UUID) -> FriendRequest:
    request = await _pending_for_receiver(session, request_id, user_id)

    request.status = RequestStatus.Rejected.value
    request.updated_at = datetime.now(timezone.utc)
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return request


# ============================================================================
# FRIENDS
# ============================================================================
async def list_friends(session: AsyncSession, user_id: uuid.UUID) -> list[User]:
    ids = await friend_ids(session, user_id)
    if not ids:
        return []
    result = await session.execute(select(User).where(User.id.in_(ids)).order_by(User.username))
    return result.scalars().all()


async def remove_friend(session: AsyncSession, user_id: uuid.UUID, friend_id: uuid.UUID) -> None:
    friendship = await get_friendship(session, user_id, friend_id)
    if not friendship:
        raise LookupError("Friendship not found")

    await session.delete(friendship)
    await session.commit()


async def sync_committee_friendships(session: AsyncSession) -> int:
    """
    Makes every admin and committee member friends with each other.
    Returns the number of friendships created.
    """
    result = await session.execute(
        select(User.id).where(or_(User.role == Role.Admin, User.is_committee == True))  # noqa: E712
    )
    member_ids = sorted(result.scalars().all(), key=str)

    existing = await session.execute(select(Friendship.user1_id, Friendship.user2_id))
    pairs = {(a, b) for a, b in existing.all()}

    created = 0
    for a, b in combinations(member_ids, 2):
        pair = ordered_pair(a, b)
        if pair in pairs:
            continue
        session.add(Friendship(user1_id=pair[0], user2_id=pair[1]))
        pairs.add(pair)
        created += 1

    await session.commit()
    return created
