"""Pytest configuration and shared fixtures."""

import pytest

from stockstream.market.interface import PriceSource


class ScriptedPriceSource(PriceSource):
    """Price source with fixed per-symbol outputs and optional failures.

    Symbols without a scripted price keep their previous price.
    """

    def __init__(self, prices=None, failing=()):
        self.prices = dict(prices or {})
        self.failing = set(failing)
        self.calls = []

    def next(self, symbol, previous_price):
        self.calls.append((symbol, previous_price))
        if symbol in self.failing:
            raise RuntimeError(f"no quote for {symbol}")
        return self.prices.get(symbol, previous_price)


@pytest.fixture
def catalog():
    """Two-symbol catalog used across server tests."""
    return {"AAPL": 100.00, "MSFT": 200.00}


@pytest.fixture
def scripted_source():
    """Price source returning AAPL=100.50 and MSFT=199.80 every tick."""
    return ScriptedPriceSource({"AAPL": 100.50, "MSFT": 199.80})
