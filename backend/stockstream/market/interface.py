"""Abstract interface for price sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PriceSource(ABC):
    """Contract for price generators consumed by the TickScheduler.

    The scheduler owns all state: it remembers each symbol's previous price
    and calls ``next`` once per known symbol per tick. Implementations may
    keep private state (e.g. a random generator) but must not depend on
    being called in any particular symbol order.

    Usage:
        source = GBMPriceSource(tick_interval=0.025)
        new_price = source.next("AAPL", 189.25)

    Raising from ``next`` is tolerated: the scheduler logs it and omits that
    symbol from the current tick only.
    """

    @abstractmethod
    def next(self, symbol: str, previous_price: float) -> float:
        """Return the next price for ``symbol`` given its previous price."""
