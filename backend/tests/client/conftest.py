"""Fixtures for client tests: an in-memory transport driven on command."""

import asyncio
import json

import pytest

from stockstream.client.transport import TransportError


class FakeConnection:
    """A connection the test can feed, drop, or break."""

    def __init__(self):
        self.sent = []
        self.closed = False
        self._inbox = asyncio.Queue()

    async def send(self, message):
        if self.closed:
            raise TransportError("send on closed connection")
        self.sent.append(message)

    async def recv(self):
        item = await self._inbox.get()
        if isinstance(item, TransportError):
            self.closed = True
            raise item
        return item

    async def close(self):
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(TransportError("closed locally"))

    def deliver(self, message):
        """Queue a server message (dict or raw text)."""
        self._inbox.put_nowait(message if isinstance(message, str) else json.dumps(message))

    def drop(self):
        """Simulate the server closing the connection."""
        self._inbox.put_nowait(TransportError("connection closed by peer"))

    def error(self, reason="network unreachable"):
        """Simulate a transport error."""
        self._inbox.put_nowait(TransportError(reason))

    @property
    def subscriptions(self):
        return [json.loads(m)["stocks"] for m in self.sent if json.loads(m).get("type") == "subscribe"]


class FakeTransport:
    """Hands out FakeConnections; ``fail_next`` makes that many connects fail."""

    def __init__(self):
        self.connections = []
        self.attempts = 0
        self.fail_next = 0

    async def connect(self, url):
        self.attempts += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise TransportError(f"connection refused: {url}")
        conn = FakeConnection()
        self.connections.append(conn)
        return conn

    @property
    def latest(self):
        return self.connections[-1]


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def wait_until():
    """Poll a predicate on the running loop until it holds or time runs out."""

    async def _wait(predicate, timeout=1.0):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met in time")
            await asyncio.sleep(0.005)

    return _wait
