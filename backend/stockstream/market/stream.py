"""WebSocket streaming endpoint and catalog endpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from ..protocol import ProtocolError, SubscribeMessage, UnknownMessage, parse_client_message
from .broadcaster import Broadcaster

logger = logging.getLogger(__name__)

WELCOME = "Welcome to the Real-Time Stock Price Streaming Application!"


def handle_client_message(broadcaster: Broadcaster, connection_id: str, raw: str | bytes) -> None:
    """Apply one inbound message from a connection.

    Subscribe messages replace the connection's subscription. Malformed
    messages get an error acknowledgment on that connection only. Messages
    with an unrecognized type are logged and ignored.
    """
    try:
        message = parse_client_message(raw)
    except ProtocolError as e:
        logger.warning("Protocol error from %s: %s", connection_id, e)
        broadcaster.send_error(connection_id, str(e))
        return

    if isinstance(message, SubscribeMessage):
        try:
            symbols = broadcaster.registry.set_subscription(connection_id, message.stocks)
        except KeyError:
            # Torn down after a failed send; the receive loop is about to end
            logger.debug("Ignoring subscribe from closed connection %s", connection_id)
            return
        logger.info("Client %s subscribed to: %s", connection_id, ", ".join(sorted(symbols)) or "<nothing>")
    elif isinstance(message, UnknownMessage):
        logger.warning("Received unknown message type from %s: %r", connection_id, message.type)


def create_stream_router(broadcaster: Broadcaster, catalog: Mapping[str, float]) -> APIRouter:
    """Create the streaming router bound to a broadcaster and the symbol catalog.

    This factory pattern lets us inject dependencies without globals.
    """
    router = APIRouter(tags=["streaming"])

    @router.get("/", response_class=PlainTextResponse)
    async def welcome() -> str:
        return WELCOME

    @router.get("/stock_list.json")
    async def stock_list() -> dict[str, float]:
        """Known symbols and their initial prices."""
        return dict(catalog)

    @router.websocket("/")
    async def price_socket(websocket: WebSocket) -> None:
        """Live price updates for the symbols this connection subscribes to.

        The client sends ``{"type": "subscribe", "stocks": [...]}`` at any time
        and receives ``{"type": "update", "data": {...}}`` on every tick where
        at least one subscribed symbol has a price.
        Text and binary frames are both accepted as UTF-8 JSON.
        """
        await websocket.accept()
        conn = broadcaster.connect(websocket)
        client = websocket.client.host if websocket.client else "unknown"
        logger.info("WebSocket %s opened from %s", conn.connection_id, client)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                handle_client_message(broadcaster, conn.connection_id, raw)
        except WebSocketDisconnect as e:
            logger.info("WebSocket %s closed by client (code %s)", conn.connection_id, e.code)
        except RuntimeError as e:
            # Raised by receive after the server side has already closed the socket
            logger.info("WebSocket %s closed: %s", conn.connection_id, e)
        finally:
            await broadcaster.disconnect(conn.connection_id)

    return router
