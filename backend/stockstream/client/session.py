"""Reconnecting streaming session: transport, subscription, and coalescing in one object."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from enum import Enum

from ..protocol import (
    ErrorMessage,
    ProtocolError,
    UnknownMessage,
    UpdateMessage,
    encode_subscribe,
    parse_server_message,
)
from .backoff import ExponentialBackoff
from .coalescer import CoalescingBuffer
from .transport import Connection, Transport, TransportError, WebSocketTransport

logger = logging.getLogger(__name__)

StatusCallback = Callable[[bool, str | None, bool], object]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    GAVE_UP = "gave_up"
    STOPPED = "stopped"


TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset(
        {ConnectionState.CONNECTING, ConnectionState.GAVE_UP, ConnectionState.STOPPED}
    ),
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.CONNECTED, ConnectionState.DISCONNECTED, ConnectionState.STOPPED}
    ),
    ConnectionState.CONNECTED: frozenset({ConnectionState.DISCONNECTED, ConnectionState.STOPPED}),
    ConnectionState.GAVE_UP: frozenset({ConnectionState.STOPPED}),
    ConnectionState.STOPPED: frozenset(),
}


class StreamSession:
    """One client-side streaming session.

    Owns the live connection, the subscription, the reconnect backoff, and the
    coalescing buffer. Everything runs on the event loop that called
    ``start()``; the connection is read and reopened by a single session
    task, so no state is shared across threads.

    Lifecycle:
        session = StreamSession("ws://localhost:8080/", on_update=render)
        await session.start()
        await session.subscribe(["AAPL", "MSFT"])
        ...
        await session.stop()

    Callbacks:
        on_update(prices)                          at most once per coalescing window
        on_connection_status(connected, message, will_retry)
        on_error(message)                          server error acks, malformed data

    The server forgets subscriptions on disconnect, so the session re-sends
    its last subscription every time a connection opens.
    """

    def __init__(
        self,
        url: str,
        on_update: Callable[[dict[str, float]], object],
        on_connection_status: StatusCallback | None = None,
        on_error: Callable[[str], object] | None = None,
        transport: Transport | None = None,
        coalesce_window: float = 0.1,
        backoff: ExponentialBackoff | None = None,
    ) -> None:
        self._url = url
        self._on_status = on_connection_status
        self._on_error = on_error
        self._transport: Transport = transport if transport is not None else WebSocketTransport()
        self._backoff = backoff if backoff is not None else ExponentialBackoff()
        self._buffer = CoalescingBuffer(on_update, window=coalesce_window)
        self._subscription: frozenset[str] = frozenset()
        self._state = ConnectionState.DISCONNECTED
        self._connection: Connection | None = None
        self._task: asyncio.Task | None = None

    # --- Public API ---

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def subscription(self) -> frozenset[str]:
        return self._subscription

    @property
    def backoff(self) -> ExponentialBackoff:
        return self._backoff

    @property
    def buffer(self) -> CoalescingBuffer:
        return self._buffer

    async def start(self) -> None:
        if self._task is not None or self._state is ConnectionState.STOPPED:
            raise RuntimeError("StreamSession can only be started once")
        self._task = asyncio.create_task(self._run(), name="stream-session")

    async def stop(self) -> None:
        """Close the connection and cancel reconnect and flush timers. Idempotent."""
        if self._state is not ConnectionState.STOPPED:
            self._set_state(ConnectionState.STOPPED)
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        await self._close_connection()
        self._buffer.cancel()
        logger.info("Stream session stopped")

    async def subscribe(self, symbols: Iterable[str]) -> None:
        """Replace the subscription and tell the server right away if connected."""
        self._subscription = frozenset(symbols)
        self._buffer.set_symbols(self._subscription)
        if self.connected:
            await self._send_subscription()

    # --- Internal ---

    def _set_state(self, new: ConnectionState) -> None:
        if new not in TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal transition {self._state.value} -> {new.value}")
        logger.debug("Session state %s -> %s", self._state.value, new.value)
        self._state = new

    async def _run(self) -> None:
        while True:
            self._set_state(ConnectionState.CONNECTING)
            try:
                self._connection = await self._transport.connect(self._url)
            except TransportError as e:
                logger.warning("Connection attempt failed: %s", e)
            else:
                await self._on_open()
                await self._read_loop()
                await self._close_connection()

            self._set_state(ConnectionState.DISCONNECTED)
            delay = self._backoff.next_delay()
            if delay is None:
                self._set_state(ConnectionState.GAVE_UP)
                message = f"Unable to reconnect after {self._backoff.max_attempts} attempts."
                logger.error("Giving up: %s", message)
                self._notify_status(False, message, False)
                return

            logger.info("Reconnecting in %.0fms (attempt %d)", delay * 1000, self._backoff.attempt)
            self._notify_status(
                False,
                f"Connection lost. Attempting to reconnect in {int(delay)}s...",
                True,
            )
            await asyncio.sleep(delay)

    async def _on_open(self) -> None:
        self._set_state(ConnectionState.CONNECTED)
        self._backoff.reset()
        if self._subscription:
            await self._send_subscription()
        self._notify_status(True, None, False)

    async def _read_loop(self) -> None:
        """Consume messages until the transport drops."""
        assert self._connection is not None
        while True:
            try:
                raw = await self._connection.recv()
            except TransportError as e:
                logger.warning("Connection lost: %s", e)
                return
            self._handle_message(raw)

    def _handle_message(self, raw: str) -> None:
        try:
            message = parse_server_message(raw)
        except ProtocolError as e:
            logger.error("Error parsing message from server: %s", e)
            self._notify_error("Received malformed data from server.")
            return

        if isinstance(message, UpdateMessage):
            self._buffer.push(message.data)
        elif isinstance(message, ErrorMessage):
            logger.warning("Server reported an error: %s", message.error)
            self._notify_error(message.error)
        elif isinstance(message, UnknownMessage):
            logger.warning("Received unknown message type: %r", message.type)

    async def _send_subscription(self) -> None:
        if self._connection is None:
            return
        try:
            await self._connection.send(encode_subscribe(self._subscription))
        except TransportError as e:
            # The read loop sees the same failure and starts the reconnect cycle
            logger.warning("Failed to send subscription: %s", e)
            return
        logger.info("Subscribed to %d symbols", len(self._subscription))

    async def _close_connection(self) -> None:
        conn, self._connection = self._connection, None
        if conn is None:
            return
        try:
            await conn.close()
        except (TransportError, OSError) as e:
            logger.debug("Error while closing connection: %s", e)

    def _notify_status(self, connected: bool, message: str | None, will_retry: bool) -> None:
        if self._on_status is None:
            return
        try:
            self._on_status(connected, message, will_retry)
        except Exception:
            logger.exception("Connection status callback failed")

    def _notify_error(self, message: str) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(message)
        except Exception:
            logger.exception("Error callback failed")
