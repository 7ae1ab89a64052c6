"""Client side of StockStream: reconnecting session with coalesced delivery.

Public API:
    StreamSession      - Reconnecting WebSocket session with subscription replay
    ConnectionState    - Session state machine states
    CoalescingBuffer   - Rate-limited, last-write-wins delivery of updates
    ExponentialBackoff - Reconnect delay policy
    reconnect_delay    - min(base * 2**attempt, cap)
    fetch_catalog      - GET the server's symbol catalog
"""

from .backoff import ExponentialBackoff, reconnect_delay
from .catalog import fetch_catalog
from .coalescer import CoalescingBuffer
from .session import ConnectionState, StreamSession
from .transport import Transport, TransportError, WebSocketTransport

__all__ = [
    "CoalescingBuffer",
    "ConnectionState",
    "ExponentialBackoff",
    "StreamSession",
    "Transport",
    "TransportError",
    "WebSocketTransport",
    "fetch_catalog",
    "reconnect_delay",
]
