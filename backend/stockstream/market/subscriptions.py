"""Per-connection subscription registry."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock


class SubscriptionRegistry:
    """Thread-safe map of connection id -> subscribed symbols.

    Writers: the WebSocket receive handler of each connection.
    Reader: the Broadcaster, once per connection per tick.

    Each subscription is stored as a frozenset that is replaced wholesale,
    so a reader sees either the old set or the new one, never a mix.
    Unknown symbols are stored as-is; they simply never match a snapshot.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, frozenset[str]] = {}
        self._lock = Lock()

    def add_connection(self, connection_id: str) -> None:
        """Register a connection with an empty subscription. No-op if present."""
        with self._lock:
            self._subscriptions.setdefault(connection_id, frozenset())

    def remove_connection(self, connection_id: str) -> None:
        with self._lock:
            self._subscriptions.pop(connection_id, None)

    def set_subscription(self, connection_id: str, symbols: Iterable[str]) -> frozenset[str]:
        """Replace the full subscription for a connection (not additive).

        Raises KeyError if the connection is not registered.
        """
        new = frozenset(symbols)
        with self._lock:
            if connection_id not in self._subscriptions:
                raise KeyError(connection_id)
            self._subscriptions[connection_id] = new
        return new

    def get(self, connection_id: str) -> frozenset[str]:
        """Current subscription; empty for unknown connections."""
        with self._lock:
            return self._subscriptions.get(connection_id, frozenset())

    def connection_ids(self) -> list[str]:
        with self._lock:
            return list(self._subscriptions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def __contains__(self, connection_id: str) -> bool:
        with self._lock:
            return connection_id in self._subscriptions
