"""WebSocket push endpoint.

Frames are JSON objects with a `command` key, loosely modelled on STOMP:

    client → {"command": "CONNECT", "headers": {"Authorization": "Bearer ..."}}
    server → {"command": "CONNECTED", "headers": {"user-name": ..., "destination": ...}}
    server → {"command": "MESSAGE", "destination": "/topic/notifications/<id>", "body": {...}}
    server → {"command": "ERROR", "message": "..."}
    client → {"command": "DISCONNECT"}
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from notifications.channel.handshake import ChannelSession, HandshakeRejected
from notifications.channel.push_port import ConnectionClosed
from notifications.channel.websocket_connection import WebSocketConnection
from notifications.notification.notification import topic_for
from notifications.utils.logging import bind_user

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _receive_frame(websocket: WebSocket) -> dict:
    raw = await websocket.receive_text()
    try:
        frame = json.loads(raw)
    except ValueError:
        return {}
    return frame if isinstance(frame, dict) else {}


def _command(frame: dict) -> str:
    return str(frame.get("command", "")).upper()


@router.websocket("/ws/notifications")
async def notifications_socket(websocket: WebSocket):
    registry = websocket.app.state.registry
    session = ChannelSession(websocket.app.state.token_verifier)

    # Gate one: refuse the upgrade outright when no credential is presented
    try:
        session.begin(
            query_token=websocket.query_params.get("token"),
            authorization=websocket.headers.get("authorization"),
        )
    except HandshakeRejected:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    # Gate two: the first frame must be a CONNECT carrying a valid credential
    try:
        frame = await _receive_frame(websocket)
        if _command(frame) != "CONNECT":
            raise session.reject("First frame must be CONNECT")
        identity = session.connect((frame.get("headers") or {}).get("Authorization"))
    except HandshakeRejected as e:
        await websocket.send_json({"command": "ERROR", "message": str(e)})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    except WebSocketDisconnect:
        return

    await websocket.send_json(
        {
            "command": "CONNECTED",
            "headers": {
                "user-name": identity.user_id,
                "destination": topic_for(identity.user_id),
            },
        }
    )

    bind_user(identity.user_id)
    connection = WebSocketConnection(websocket, asyncio.get_running_loop(), identity.user_id)
    try:
        registry.register(identity.user_id, connection)
    except ConnectionClosed:
        await websocket.close(code=status.WS_1001_GOING_AWAY)
        return

    try:
        while True:
            frame = await _receive_frame(websocket)
            if _command(frame) == "DISCONNECT":
                await websocket.close()
                break
    except WebSocketDisconnect:
        pass
    finally:
        connection.close()
        registry.unregister(identity.user_id, connection)
