"""Fan-out of tick snapshots to subscribed connections."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from typing import Protocol

from ..protocol import encode_error, encode_update
from .models import PriceSnapshot
from .subscriptions import SubscriptionRegistry

logger = logging.getLogger(__name__)


class OutboundTransport(Protocol):
    """The slice of a server-side WebSocket the broadcaster needs."""

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


class ClientConnection:
    """One live transport session and its ordered outbound queue.

    Messages are sent by a dedicated sender task, one at a time, in the order
    they were enqueued. The queue is bounded: when a slow client lets it fill
    up, the oldest queued message is dropped, since every update carries the
    full current intersection and supersedes the ones before it.
    """

    def __init__(
        self,
        connection_id: str,
        transport: OutboundTransport,
        queue_size: int = 8,
        send_timeout: float = 1.0,
    ) -> None:
        self.connection_id = connection_id
        self.transport = transport
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._send_timeout = send_timeout
        self._task: asyncio.Task | None = None
        self.dropped = 0

    def enqueue(self, payload: str) -> None:
        """Queue a payload without blocking."""
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
            logger.debug("Dropped stale message for slow connection %s", self.connection_id)
        self._queue.put_nowait(payload)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self, on_failure: Callable[[str], None]) -> None:
        self._task = asyncio.create_task(
            self._send_loop(on_failure), name=f"sender-{self.connection_id}"
        )

    async def stop(self) -> None:
        if self._task and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def _send_loop(self, on_failure: Callable[[str], None]) -> None:
        while True:
            payload = await self._queue.get()
            try:
                await asyncio.wait_for(self.transport.send_text(payload), self._send_timeout)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # TimeoutError, closed socket, broken pipe: all mean this client is gone
                logger.warning("Send to connection %s failed: %r", self.connection_id, e)
                on_failure(self.connection_id)
                return


class Broadcaster:
    """Delivers each tick's snapshot to every connection, filtered by subscription.

    ``publish`` is synchronous and never awaits a client: it computes
    ``snapshot ∩ subscription`` per connection and enqueues the serialized
    update. Connections with an empty intersection get nothing.

    Lifecycle:
        conn = broadcaster.connect(websocket)
        registry.set_subscription(conn.connection_id, ["AAPL"])
        broadcaster.publish(snapshot)   # called by the TickScheduler
        await broadcaster.disconnect(conn.connection_id)
    """

    def __init__(
        self,
        registry: SubscriptionRegistry | None = None,
        queue_size: int = 8,
        send_timeout: float = 1.0,
    ) -> None:
        self.registry = registry if registry is not None else SubscriptionRegistry()
        self._connections: dict[str, ClientConnection] = {}
        self._queue_size = queue_size
        self._send_timeout = send_timeout
        self._teardowns: set[asyncio.Task] = set()

    def connect(self, transport: OutboundTransport) -> ClientConnection:
        """Register a freshly accepted transport with an empty subscription."""
        connection_id = uuid.uuid4().hex[:12]
        conn = ClientConnection(
            connection_id,
            transport,
            queue_size=self._queue_size,
            send_timeout=self._send_timeout,
        )
        self._connections[connection_id] = conn
        self.registry.add_connection(connection_id)
        conn.start(self._schedule_teardown)
        logger.info("Client connected: %s (%d live)", connection_id, len(self._connections))
        return conn

    async def disconnect(self, connection_id: str, close_transport: bool = False) -> None:
        """Forget a connection and its subscription. Safe to call more than once."""
        conn = self._connections.pop(connection_id, None)
        self.registry.remove_connection(connection_id)
        if conn is None:
            return
        await conn.stop()
        if close_transport:
            try:
                await conn.transport.close()
            except Exception as e:
                logger.debug("Closing transport for %s failed: %r", connection_id, e)
        logger.info("Client disconnected: %s (%d live)", connection_id, len(self._connections))

    def publish(self, snapshot: PriceSnapshot) -> int:
        """Enqueue this tick's update for every interested connection.

        Returns the number of connections that were sent a message.
        """
        payloads: dict[frozenset[str], str | None] = {}
        sent = 0
        for connection_id, conn in list(self._connections.items()):
            subscription = self.registry.get(connection_id)
            if subscription not in payloads:
                data = snapshot.restrict(subscription)
                payloads[subscription] = encode_update(data) if data else None
            payload = payloads[subscription]
            if payload is None:
                continue
            try:
                conn.enqueue(payload)
            except Exception:
                logger.exception("Failed to queue tick %d for %s", snapshot.seq, connection_id)
                self._schedule_teardown(connection_id)
                continue
            sent += 1
        return sent

    def send_error(self, connection_id: str, message: str) -> None:
        """Queue an error acknowledgment for one connection only."""
        conn = self._connections.get(connection_id)
        if conn is not None:
            conn.enqueue(encode_error(message))

    async def close_all(self) -> None:
        for connection_id in list(self._connections):
            await self.disconnect(connection_id, close_transport=True)
        if self._teardowns:
            await asyncio.gather(*self._teardowns, return_exceptions=True)

    def get(self, connection_id: str) -> ClientConnection | None:
        return self._connections.get(connection_id)

    def connection_ids(self) -> list[str]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    # --- Internal ---

    def _schedule_teardown(self, connection_id: str) -> None:
        if connection_id not in self._connections:
            return
        task = asyncio.create_task(
            self.disconnect(connection_id, close_transport=True),
            name=f"teardown-{connection_id}",
        )
        self._teardowns.add(task)
        task.add_done_callback(self._teardowns.discard)
