"""Connection registry — live push connections keyed by verified user id.

Only connections registered under a user id ever receive that user's
payloads; there is no broadcast path. Registration happens after the
handshake has authenticated the session, so the key is always a verified
identity.

Mutations take a lock. Delivery copies the user's connection set under the
lock and sends outside it, so a slow or broken client never holds up
registration or delivery to anyone else.
"""

from __future__ import annotations

import threading

import structlog

from notifications.channel.push_port import ConnectionClosed, PushConnection
from notifications.notification.notification import topic_for

logger = structlog.get_logger(__name__)


class ConnectionRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[str, set[PushConnection]] = {}
        self._closed = False

    def register(self, user_id, connection: PushConnection) -> None:
        with self._lock:
            if self._closed:
                raise ConnectionClosed("Registry is shut down")
            self._connections.setdefault(str(user_id), set()).add(connection)
            count = len(self._connections[str(user_id)])

        logger.info("Push connection registered", user_id=str(user_id), connections=count)

    def unregister(self, user_id, connection: PushConnection) -> None:
        with self._lock:
            self._discard(str(user_id), connection)

        logger.info("Push connection unregistered", user_id=str(user_id))

    def connections_for(self, user_id) -> tuple[PushConnection, ...]:
        with self._lock:
            return tuple(self._connections.get(str(user_id), ()))

    def user_count(self) -> int:
        with self._lock:
            return len(self._connections)

    def deliver(self, user_id, payload: dict) -> int:
        """Send `payload` to every live connection of `user_id`.

        Returns the number of connections the payload was handed to. Zero
        connections is not an error: the notification is already stored.
        """
        frame = {
            "command": "MESSAGE",
            "destination": topic_for(user_id),
            "body": payload,
        }

        delivered = 0
        for connection in self.connections_for(user_id):
            if connection.closed:
                self.unregister(user_id, connection)
                continue
            try:
                connection.send(frame)
                delivered += 1
            except ConnectionClosed:
                self.unregister(user_id, connection)
            except Exception as e:
                logger.error(
                    "Push delivery failed",
                    user_id=str(user_id),
                    error=str(e),
                )
                self.unregister(user_id, connection)

        logger.debug("Push delivered", user_id=str(user_id), connections=delivered)
        return delivered

    def close(self) -> None:
        """Close every connection and refuse new registrations."""
        with self._lock:
            self._closed = True
            connections = [c for conns in self._connections.values() for c in conns]
            self._connections.clear()

        for connection in connections:
            connection.close()

        logger.info("Connection registry closed", connections=len(connections))

    def _discard(self, user_id: str, connection: PushConnection) -> None:
        conns = self._connections.get(user_id)
        if conns is None:
            return
        conns.discard(connection)
        if not conns:
            del self._connections[user_id]
