"""Administrator broadcast channel: pushes live events to connected admins.

``AdminChannel`` is the port the ordering flow publishes through.
``WebSocketChannel`` fans each event out to every admin connected on
``/api/order/notifications/ws``; ``FakeChannel`` records publications for
tests.
"""

import asyncio
from abc import ABC, abstractmethod

import structlog
from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = structlog.get_logger(__name__)


class AdminChannel(ABC):
    """Abstract interface for broadcasting events to administrators."""

    @abstractmethod
    def publish(self, event: str, payload: dict) -> None:
        """Send ``{"event": event, "data": payload}`` to every subscriber."""
        ...


class WebSocketChannel(AdminChannel):
    """Broadcast over the WebSocket connections of signed-in administrators.

    ``publish`` may be called from worker threads (sync route handlers);
    sends are scheduled on the event loop that accepted the connections.
    """

    def __init__(self) -> None:
        self.connections: set[WebSocket] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    async def connect(self, websocket: WebSocket) -> None:
        self._loop = asyncio.get_running_loop()
        self.connections.add(websocket)
        await websocket.accept()
        logger.info("admin_channel_connected", subscribers=len(self.connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)
        logger.info("admin_channel_disconnected", subscribers=len(self.connections))

    async def _send(self, websocket: WebSocket, message: dict) -> None:
        try:
            await websocket.send_json(message)
        except Exception:
            logger.warning("admin_channel_send_failed")
            self.disconnect(websocket)

    def publish(self, event: str, payload: dict) -> None:
        if not self.connections or self._loop is None:
            return

        message = {"event": event, "data": jsonable_encoder(payload)}
        for websocket in list(self.connections):
            asyncio.run_coroutine_threadsafe(self._send(websocket, message), self._loop)
        logger.debug("admin_channel_published", admin_event=event, subscribers=len(self.connections))


class FakeChannel(AdminChannel):
    """Channel that records publications in memory for test assertions."""

    def __init__(self) -> None:
        self.published: list[dict] = []
        self.should_fail = False

    def configure(self, should_fail: bool = False) -> None:
        self.should_fail = should_fail

    def publish(self, event: str, payload: dict) -> None:
        if self.should_fail:
            raise ConnectionError("Broadcast channel unavailable")
        self.published.append({"event": event, "data": payload})

    def reset(self) -> None:
        self.published.clear()
        self.should_fail = False
