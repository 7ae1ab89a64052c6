"""Data models for market data."""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class PriceSnapshot:
    """Immutable set of prices produced by one tick.

    ``prices`` holds one entry per known symbol whose price source call
    succeeded this tick, already rounded for the wire. ``seq`` increases by
    one per tick so consumers can check per-symbol ordering.
    """

    seq: int
    prices: Mapping[str, float]
    timestamp: float = field(default_factory=time.time)  # Unix seconds

    def __post_init__(self) -> None:
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    def restrict(self, symbols: Iterable[str]) -> dict[str, float]:
        """Prices for the symbols present in both this snapshot and ``symbols``."""
        prices = self.prices
        return {symbol: prices[symbol] for symbol in symbols if symbol in prices}

    def __len__(self) -> int:
        return len(self.prices)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self.prices
