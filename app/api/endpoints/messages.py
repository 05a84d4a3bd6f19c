# app/api/endpoints/messages.py

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID
from loguru import logger

from app.api.deps import get_db_session, get_current_user, user_from_token
from app.core.database import AsyncSessionLocal
from app.core.rbac import Authorize
from app.models.messaging import Channel, DirectConversation, Message
from app.models.user import User
from app.schemas.messaging import ChannelCreate, DMRequest, DMStatusUpdate, MessageSend
from app.services.chat_relay import chat_relay
from app.services import message_service

router = APIRouter(prefix="/api/messages", tags=["Messaging"])
ws_router = APIRouter(tags=["Messaging"])


def _translate(e: Exception) -> HTTPException:
    if isinstance(e, LookupError):
        return HTTPException(404, str(e))
    if isinstance(e, PermissionError):
        return HTTPException(403, str(e))
    return HTTPException(400, str(e))


# ===================================================================
# CHANNELS
# ===================================================================
@router.get("/channels", response_model=List[Channel])
async def list_channels(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await message_service.list_channels_for_user(session, current_user.id)


@router.post("/channels", response_model=Channel, status_code=status.HTTP_201_CREATED)
async def create_channel(
    data: ChannelCreate,
    current_user: User = Depends(Authorize("create_channel")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await message_service.create_channel(session, data, current_user.id)
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.get("/channels/{channel_id}/history", response_model=List[Message])
async def channel_history(
    channel_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await message_service.channel_history(session, channel_id, current_user.id)
    except (LookupError, PermissionError) as e:
        raise _translate(e)


# ===================================================================
# DIRECT MESSAGES
# ===================================================================
@router.post("/dm/request", response_model=DirectConversation, status_code=status.HTTP_201_CREATED)
async def request_dm(
    data: DMRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await message_service.request_dm(session, current_user.id, data.recipient_id)
    except (LookupError, ValueError) as e:
        raise _translate(e)


@router.put("/dm/{dm_id}", response_model=DirectConversation)
async def respond_dm(
    dm_id: UUID,
    data: DMStatusUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await message_service.respond_dm(session, dm_id, current_user.id, data.status)
    except (LookupError, PermissionError, ValueError) as e:
        raise _translate(e)


@router.get("/dm", response_model=List[DirectConversation])
async def list_dms(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await message_service.list_dms(session, current_user.id)


@router.get("/dm/{dm_id}/history", response_model=List[Message])
async def dm_history(
    dm_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        return await message_service.dm_history(session, dm_id, current_user.id)
    except (LookupError, PermissionError) as e:
        raise _translate(e)


# ===================================================================
# SEND (persist, then broadcast)
# ===================================================================
@router.post("/send", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageSend,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        if data.channel_id:
            message = await message_service.send_channel_message(session, data.channel_id, current_user.id, data.content)
        else:
            message = await message_service.send_dm_message(session, data.dm_id, current_user.id, data.content)
    except (LookupError, PermissionError, ValueError) as e:
        raise _translate(e)

    await chat_relay.broadcast(message_service.room_for(message), message_service.message_event(message))
    return message


@router.delete("/{message_id}")
async def delete_message(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        message = await message_service.delete_own_message(session, message_id, current_user.id)
    except LookupError as e:
        raise HTTPException(404, str(e))

    await chat_relay.broadcast(message_service.room_for(message), message_service.message_deleted_event(message))
    return {"detail": "Message deleted"}


# ===================================================================
# WEBSOCKETS: /ws/chat/{channel_id}?token=...  /ws/dm/{dm_id}?token=...
# ===================================================================
async def _open_room(websocket: WebSocket, token: str, check) -> Optional[User]:
    """Authenticate and run ``check(session, user)``; closes the socket and returns None on refusal."""
    async with AsyncSessionLocal() as session:
        try:
            user = await user_from_token(session, token)
            await check(session, user)
        except HTTPException as e:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e.detail))
            return None
        except (LookupError, PermissionError, ValueError) as e:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e))
            return None
    return user


async def _serve_room(websocket: WebSocket, user: User, room: str, send) -> None:
    """Relay loop: every inbound ``{"content": ...}`` is persisted with ``send`` and broadcast to the room."""
    await websocket.accept()
    await chat_relay.join(room, websocket)
    logger.info(f"User {user.username} connected to chat {room}")

    try:
        while True:
            payload = await websocket.receive_json()
            content = str(payload.get("content", "")).strip() if isinstance(payload, dict) else ""
            if not content:
                await websocket.send_json({"type": "error", "detail": "Empty message"})
                continue

            async with AsyncSessionLocal() as session:
                try:
                    message = await send(session, content)
                except (LookupError, PermissionError, ValueError) as e:
                    await websocket.send_json({"type": "error", "detail": str(e)})
                    continue

            await chat_relay.broadcast(room, message_service.message_event(message))

    except WebSocketDisconnect:
        logger.info(f"User {user.username} left chat {room}")
    finally:
        await chat_relay.leave(room, websocket)


@ws_router.websocket("/ws/chat/{channel_id}")
async def chat_socket(websocket: WebSocket, channel_id: UUID, token: str = Query(...)):
    async def check(session, user):
        await message_service.get_accessible_channel(session, channel_id, user.id)

    user = await _open_room(websocket, token, check)
    if user is None:
        return

    async def send(session, content):
        return await message_service.send_channel_message(session, channel_id, user.id, content)

    await _serve_room(websocket, user, str(channel_id), send)


@ws_router.websocket("/ws/dm/{dm_id}")
async def dm_socket(websocket: WebSocket, dm_id: UUID, token: str = Query(...)):
    async def check(session, user):
        await message_service.get_open_dm(session, dm_id, user.id)

    user = await _open_room(websocket, token, check)
    if user is None:
        return

    async def send(session, content):
        return await message_service.send_dm_message(session, dm_id, user.id, content)

    await _serve_room(websocket, user, str(dm_id), send)
