"""Client-side coalescing of price updates into rate-limited flushes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping

logger = logging.getLogger(__name__)


class CoalescingBuffer:
    """Merges incoming per-symbol prices and delivers them at most once per window.

    The first update after a flush arms a timer for ``window`` seconds. Later
    updates in the same window overwrite per symbol (last write wins). When
    the timer fires, the whole pending map goes to ``on_flush`` in one call
    and is cleared. A flush is only armed when something is pending, so an
    empty map is never delivered.

    Must be used from a single event loop; all state is touched only by
    callbacks on that loop.
    """

    def __init__(
        self,
        on_flush: Callable[[dict[str, float]], object],
        window: float = 0.1,
        symbols: Iterable[str] = (),
    ) -> None:
        self._on_flush = on_flush
        self._window = window
        self._symbols: frozenset[str] = frozenset(symbols)
        self._pending: dict[str, float] = {}
        self._handle: asyncio.TimerHandle | None = None

    @property
    def symbols(self) -> frozenset[str]:
        return self._symbols

    def set_symbols(self, symbols: Iterable[str]) -> None:
        """Replace the accepted symbols and drop pending values for the rest."""
        self._symbols = frozenset(symbols)
        self._pending = {s: p for s, p in self._pending.items() if s in self._symbols}
        if not self._pending:
            self._cancel_timer()

    @property
    def pending(self) -> dict[str, float]:
        return dict(self._pending)

    @property
    def flush_scheduled(self) -> bool:
        return self._handle is not None

    def push(self, prices: Mapping[str, float]) -> None:
        """Merge an update, keeping only currently subscribed symbols."""
        accepted = {s: p for s, p in prices.items() if s in self._symbols}
        if not accepted:
            return
        self._pending.update(accepted)
        if self._handle is None:
            loop = asyncio.get_running_loop()
            self._handle = loop.call_later(self._window, self.flush)

    def flush(self) -> None:
        """Deliver everything pending now. No-op when nothing is pending."""
        self._cancel_timer()
        if not self._pending:
            return
        batch, self._pending = self._pending, {}
        try:
            self._on_flush(batch)
        except Exception:
            logger.exception("Update consumer failed on a batch of %d symbols", len(batch))

    def cancel(self) -> None:
        """Discard pending updates and any armed flush."""
        self._cancel_timer()
        self._pending = {}

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
