"""
Transport adapters implementing the hub's Channel protocol.
"""

import asyncio
from typing import Any

from starlette.websockets import WebSocket, WebSocketDisconnect

from counter import ObserverDeliveryFailed


class WebSocketChannel:
    """Pushes messages as JSON text frames on an accepted WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    async def send(self, message: dict[str, Any]) -> None:
        try:
            await self.websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            raise ObserverDeliveryFailed(f"websocket closed: {e!r}") from e


class QueueChannel:
    """
    Hands messages to a local consumer such as an SSE stream.

    The queue holds a single message so a slow consumer applies backpressure
    to its writer instead of accumulating stale values.
    """

    def __init__(self) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=1)
        self.closed = False

    async def send(self, message: dict[str, Any]) -> None:
        if self.closed:
            raise ObserverDeliveryFailed("stream closed")
        await self.queue.put(message)

    async def get(self) -> dict[str, Any]:
        return await self.queue.get()

    def close(self) -> None:
        self.closed = True
