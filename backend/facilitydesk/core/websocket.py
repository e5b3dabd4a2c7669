"""WebSocket connection manager for live dashboard updates.

Keeps the open sockets per signed-in user and pushes change and
notification messages to them.
"""

import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active WebSocket connections per user."""

    def __init__(self):
        # user_id -> set of active WebSocket connections
        self._connections: dict[str, set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.setdefault(user_id, set()).add(websocket)
        logger.info(f"WebSocket connected for {user_id} ({self.get_total_connections()} open)")

    async def disconnect(self, websocket: WebSocket, user_id: str) -> None:
        async with self._lock:
            conns = self._connections.get(user_id)
            if conns is not None:
                conns.discard(websocket)
                if not conns:
                    del self._connections[user_id]

    async def broadcast(self, message: dict) -> None:
        """Send a message to every open connection."""
        async with self._lock:
            connections = set().union(*self._connections.values()) if self._connections else set()
        await self._send(connections, message)

    async def _send(self, connections: set[WebSocket], message: dict) -> None:
        if not connections:
            return

        data = json.dumps(message)
        closed = []
        for ws in connections:
            try:
                await ws.send_text(data)
            except Exception:
                # Connection closed or errored
                closed.append(ws)

        if closed:
            async with self._lock:
                for user_id in list(self._connections):
                    self._connections[user_id].difference_update(closed)
                    if not self._connections[user_id]:
                        del self._connections[user_id]

    def get_total_connections(self) -> int:
        return sum(len(conns) for conns in self._connections.values())
