"""Client transport abstraction and its WebSocket implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Any failure to open, use, or keep a transport connection."""


class Connection(Protocol):
    async def send(self, message: str) -> None: ...

    async def recv(self) -> str: ...

    async def close(self) -> None: ...


class Transport(Protocol):
    async def connect(self, url: str) -> Connection: ...


class WebSocketConnection:
    """Wraps a ``websockets`` client connection, raising TransportError only."""

    def __init__(self, ws) -> None:
        self._ws = ws

    async def send(self, message: str) -> None:
        try:
            await self._ws.send(message)
        except ConnectionClosed as e:
            raise TransportError(f"connection closed: {e}") from e

    async def recv(self) -> str:
        try:
            message = await self._ws.recv()
        except ConnectionClosed as e:
            raise TransportError(f"connection closed: {e}") from e
        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    async def close(self) -> None:
        await self._ws.close()


class WebSocketTransport:
    """Opens connections with the ``websockets`` library."""

    def __init__(self, open_timeout: float = 10.0, ping_interval: float | None = 20.0) -> None:
        self._open_timeout = open_timeout
        self._ping_interval = ping_interval

    async def connect(self, url: str) -> WebSocketConnection:
        try:
            ws = await websockets.connect(
                url,
                open_timeout=self._open_timeout,
                ping_interval=self._ping_interval,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise TransportError(f"cannot connect to {url}: {e!r}") from e
        logger.info("WebSocket connection established: %s", url)
        return WebSocketConnection(ws)
