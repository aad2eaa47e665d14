"""WebSocket endpoint — admits live viewers into the connection registry.

Clients connect to / (what the bundled frontend uses) or /ws. The handler:
1. Accepts the upgrade and admits the socket into the registry
2. Reads inbound frames until the client goes away. Text frames holding
   {"type": "ping"} get a pong; every other frame, binary included, is
   ignored
3. Removes the socket from the registry on close or error

Learn: Outbound weather events are pushed by the Broadcaster, not by this
handler. The loop reads raw ASGI messages rather than receive_text(), so a
binary frame is skipped instead of tearing down a healthy subscriber.
"""

import json

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from weatherrelay.dependencies import get_registry
from weatherrelay.realtime.registry import ConnectionRegistry

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/")
@router.websocket("/ws")
async def subscriber_websocket(
    websocket: WebSocket,
    registry: ConnectionRegistry = Depends(get_registry),
):
    """Long-lived subscriber connection. No handshake payload is required."""
    await websocket.accept()
    registry.admit(websocket)
    client = websocket.client.host if websocket.client else "unknown"
    logger.info("websocket.connected", client=client)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            data = message.get("text")
            if data is None:
                continue
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("type") == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning("websocket.error", client=client, error=str(e))
    finally:
        registry.remove(websocket)
        logger.info("websocket.disconnected", client=client)
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()
