"""Fixed-period tick scheduler that turns price source output into snapshots."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable, Mapping

from .cache import PriceCache
from .interface import PriceSource
from .models import PriceSnapshot

logger = logging.getLogger(__name__)


class TickScheduler:
    """Runs a background asyncio task that produces one PriceSnapshot per tick.

    Each tick calls the price source once per known symbol, rounds the result
    to ``precision`` decimals for the wire, records the unrounded value in the
    PriceCache, and hands the snapshot to ``on_tick``.

    ``on_tick`` must not block: the broadcaster only enqueues per-connection
    messages, so a slow client can never delay the next tick.
    """

    def __init__(
        self,
        catalog: Mapping[str, float],
        price_source: PriceSource,
        on_tick: Callable[[PriceSnapshot], object],
        price_cache: PriceCache | None = None,
        interval: float = 0.025,
        precision: int = 2,
    ) -> None:
        self._symbols: tuple[str, ...] = tuple(catalog)
        self._initial = dict(catalog)
        self._source = price_source
        self._on_tick = on_tick
        self._cache = price_cache if price_cache is not None else PriceCache()
        self._interval = interval
        self._precision = precision
        self._seq = 0
        self._task: asyncio.Task | None = None
        self._cache.seed(self._initial)

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def cache(self) -> PriceCache:
        return self._cache

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            raise RuntimeError("TickScheduler already started")
        self._task = asyncio.create_task(self._run_loop(), name="tick-scheduler")
        logger.info(
            "Tick scheduler started: %d symbols, %.0fms interval",
            len(self._symbols),
            self._interval * 1000,
        )

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Tick scheduler stopped")

    def tick(self) -> PriceSnapshot:
        """Produce the next snapshot. Symbols whose price source call fails are omitted."""
        previous = self._cache.get_all()
        raw: dict[str, float] = {}
        rounded: dict[str, float] = {}

        for symbol in self._symbols:
            prev = previous.get(symbol, self._initial[symbol])
            try:
                price = float(self._source.next(symbol, prev))
            except Exception as e:
                logger.warning("Price source failed for %s, skipping this tick: %s", symbol, e)
                continue
            if not math.isfinite(price) or price <= 0:
                logger.warning("Price source returned invalid price for %s: %r", symbol, price)
                continue
            raw[symbol] = price
            rounded[symbol] = round(price, self._precision)

        self._cache.update_many(raw)
        self._seq += 1
        return PriceSnapshot(seq=self._seq, prices=rounded)

    # --- Internal ---

    async def _run_loop(self) -> None:
        """Tick on a fixed period. Deadlines are absolute so work time does not cause drift."""
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            try:
                snapshot = self.tick()
                self._on_tick(snapshot)
            except Exception:
                logger.exception("Tick %d failed", self._seq)

            next_at += self._interval
            delay = next_at - loop.time()
            if delay < 0:
                # Fell behind; resynchronize instead of firing a burst of catch-up ticks
                logger.debug("Tick loop behind schedule by %.1fms", -delay * 1000)
                next_at = loop.time()
                delay = 0
            await asyncio.sleep(delay)
