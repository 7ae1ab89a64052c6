"""Fixtures for server-side market tests."""

import asyncio
import json

import pytest


class FakeWebSocket:
    """Stands in for a FastAPI WebSocket on the outbound path.

    ``fail`` makes every send raise; ``delay`` makes every send slow.
    """

    def __init__(self, fail=False, delay=0.0):
        self.sent = []
        self.fail = fail
        self.delay = delay
        self.closed = False

    async def send_text(self, data):
        if self.fail or self.closed:
            raise RuntimeError("Cannot send once the socket is closed")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(data)

    async def close(self, code=1000):
        self.closed = True

    @property
    def messages(self):
        return [json.loads(text) for text in self.sent]


@pytest.fixture
def make_socket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket
