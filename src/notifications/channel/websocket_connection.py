"""WebSocket push connection — hands frames to the server's event loop.

Event processors run on worker threads; the WebSocket lives on the ASGI
event loop. `send` schedules the write on that loop and returns at once,
so a processor never waits on a client.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Future

import structlog
from starlette.websockets import WebSocket

from notifications.channel.push_port import ConnectionClosed, PushConnection

logger = structlog.get_logger(__name__)


class WebSocketConnection(PushConnection):
    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop, user_id: str):
        self._websocket = websocket
        self._loop = loop
        self._user_id = user_id
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed or self._loop.is_closed()

    def send(self, frame: dict) -> None:
        if self.closed:
            raise ConnectionClosed(f"WebSocket for {self._user_id} is closed")

        future = asyncio.run_coroutine_threadsafe(self._websocket.send_json(frame), self._loop)
        future.add_done_callback(self._on_sent)

    def close(self) -> None:
        self._closed = True

    def _on_sent(self, future: Future) -> None:
        if future.cancelled():
            self._closed = True
            return
        exc = future.exception()
        if exc is not None:
            self._closed = True
            logger.warning(
                "WebSocket send failed, connection marked closed",
                user_id=self._user_id,
                error=str(exc),
            )
