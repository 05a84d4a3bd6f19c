# app/services/chat_relay.py

import asyncio
from typing import Any, Dict, Set

from fastapi import WebSocket
from loguru import logger


class ChatRelay:
    """
    In-process pub/sub for chat rooms.

    A room is a channel id or a DM id (as string). Each room holds the set of
    websockets currently listening; ``broadcast`` pushes a JSON event to all
    of them and drops sockets that fail to receive.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def join(self, room: str, websocket: WebSocket) -> None:
        async with self._lock:
            self._rooms.setdefault(room, set()).add(websocket)
        logger.debug(f"Websocket joined room {room}")

    async def leave(self, room: str, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self._rooms.get(room)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._rooms[room]
        logger.debug(f"Websocket left room {room}")

    async def broadcast(self, room: str, event: Dict[str, Any]) -> int:
        """Returns the number of sockets that received the event."""
        async with self._lock:
            sockets = list(self._rooms.get(room, ()))

        dead = []
        delivered = 0
        for websocket in sockets:
            try:
                await websocket.send_json(event)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping dead websocket in room {room}: {e}")
                dead.append(websocket)

        for websocket in dead:
            await self.leave(room, websocket)

        return delivered

    def listeners(self, room: str) -> int:
        return len(self._rooms.get(room, ()))


chat_relay = ChatRelay()
