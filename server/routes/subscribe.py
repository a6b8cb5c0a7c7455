"""
Real-time subscription endpoints.

Both transports register an observer with the hub, which sends the current
value on join and every committed change afterwards.
"""

import json
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, HTTPException, WebSocket
from sse_starlette.sse import EventSourceResponse

from counter import BroadcastHub, StorageUnavailable
from counter.events import MESSAGE_TYPE

from ..channels import QueueChannel, WebSocketChannel
from ..state import get_service

logger = logging.getLogger(__name__)

router = APIRouter()

# Closed with "try again later" when the initial value cannot be read
WS_CLOSE_TRY_AGAIN_LATER = 1013


@router.websocket("/")
@router.websocket("/ws")
async def counter_socket(websocket: WebSocket) -> None:
    """Subscribe to counter changes over a WebSocket."""
    await websocket.accept()
    hub = get_service().hub
    try:
        observer = await hub.register(WebSocketChannel(websocket))
    except StorageUnavailable as e:
        logger.warning("Rejecting subscriber: %s", e)
        await websocket.close(code=WS_CLOSE_TRY_AGAIN_LATER)
        return

    try:
        # Inbound frames carry nothing; reading only detects the disconnect.
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug("WebSocket closed for %r", observer)
                break
    finally:
        await hub.unregister(observer)


@router.get("/events")
async def counter_events() -> EventSourceResponse:
    """Subscribe to counter changes via SSE."""
    service = get_service()
    hub = service.hub
    try:
        # Fail fast with a 503 before the stream starts.
        await service.store.read()
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return EventSourceResponse(counter_event_stream(hub))


async def counter_event_stream(hub: BroadcastHub) -> AsyncGenerator[dict, None]:
    """Yield one SSE event per push the hub sends to this subscriber."""
    channel = QueueChannel()
    observer = await hub.register(channel)
    try:
        while True:
            message = await channel.get()
            yield {"event": MESSAGE_TYPE, "data": json.dumps(message)}
    finally:
        channel.close()
        await hub.unregister(observer)
