"""WebSocket endpoint pushing change events and notifications to the UI."""

import json
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from facilitydesk.context import DashboardContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/realtime", tags=["realtime"])


def _is_ping(raw: str) -> bool:
    if raw.strip().lower() == "ping":
        return True
    try:
        message = json.loads(raw)
    except ValueError:
        return False
    return isinstance(message, dict) and message.get("type") == "ping"


@router.websocket("/ws")
async def realtime_ws(websocket: WebSocket, token: str | None = Query(None)):
    ctx: DashboardContext = websocket.app.state.context
    auth = await ctx.auth.get_auth_state(token)
    if not auth.signed_in:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await ctx.connections.connect(websocket, auth.user_id)
    try:
        while True:
            raw = await websocket.receive_text()
            if _is_ping(raw):
                await websocket.send_text(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for {auth.user_id}")
    finally:
        await ctx.connections.disconnect(websocket, auth.user_id)
