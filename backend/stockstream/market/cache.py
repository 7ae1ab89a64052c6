"""Thread-safe in-memory price cache."""

from __future__ import annotations

from collections.abc import Mapping
from threading import Lock


class PriceCache:
    """Thread-safe cache of the latest unrounded price for each symbol.

    Writer: TickScheduler (once per tick, all symbols in one batch).
    Readers: TickScheduler (previous price for the price source), anything
    that wants a consistent view of current prices.

    Prices are stored at full precision so that rounding for the wire never
    feeds back into the random walk.
    """

    def __init__(self) -> None:
        self._prices: dict[str, float] = {}
        self._lock = Lock()

    def seed(self, prices: Mapping[str, float]) -> None:
        """Replace the cache contents with the given prices."""
        with self._lock:
            self._prices = dict(prices)

    def update_many(self, prices: Mapping[str, float]) -> None:
        """Record several prices under one lock acquisition."""
        if not prices:
            return
        with self._lock:
            self._prices.update(prices)

    def get_all(self) -> dict[str, float]:
        """Snapshot of all current prices. Returns a shallow copy."""
        with self._lock:
            return dict(self._prices)
