from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

from config.database import SessionLocal
from shared_utils.helpers import utc_timestamp
from .registry import ConnectionRegistry
from .relay import NotificationRelay
from .scheduler import HeartbeatScheduler
from .store import EntityStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

registry = ConnectionRegistry()
relay = NotificationRelay(registry, EntityStore(SessionLocal))
heartbeat_scheduler = HeartbeatScheduler(registry)


async def receive_frame(websocket: WebSocket):
    """
    Next text frame from the socket. Binary frames have no text and come back
    as None, which the relay rejects as malformed.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    return message.get("text")


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()
    connection_id = registry.register(websocket)
    connection = registry.get(connection_id)

    try:
        await connection.send({
            "type": "connected",
            "message": "Connected to GateSphere",
            "timestamp": utc_timestamp(),
        })
        while True:
            raw = await receive_frame(websocket)
            result = await relay.dispatch(connection, raw)
            if not result.ok:
                logger.info(f"Event '{result.event}' from {connection.describe()} failed: {result.error}")
    except WebSocketDisconnect:
        logger.info(f"Client disconnected: {connection.describe()}")
    finally:
        registry.unregister(connection_id)
