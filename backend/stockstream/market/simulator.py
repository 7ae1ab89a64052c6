"""GBM-based price source."""

from __future__ import annotations

import logging
import math

import numpy as np

from .interface import PriceSource
from .seed_prices import DEFAULT_PARAMS, SYMBOL_PARAMS

logger = logging.getLogger(__name__)


class GBMPriceSource(PriceSource):
    """Geometric Brownian Motion price source.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Where:
        S(t)   = previous price
        mu     = annualized drift (expected return)
        sigma  = annualized volatility
        dt     = tick interval as a fraction of a trading year
        Z      = standard normal random variable

    On top of the diffusion, each call has a small chance of a 2-5% jump
    in either direction so the stream has visible events.
    """

    # 252 trading days * 6.5 hours/day * 3600 seconds/hour = 5,896,800 seconds
    TRADING_SECONDS_PER_YEAR = 252 * 6.5 * 3600

    def __init__(
        self,
        tick_interval: float = 0.025,
        event_probability: float = 0.0005,
        params: dict[str, dict[str, float]] | None = None,
        seed: int | None = None,
    ) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self._dt = tick_interval / self.TRADING_SECONDS_PER_YEAR
        self._event_prob = event_probability
        self._params = SYMBOL_PARAMS if params is None else params
        self._rng = np.random.default_rng(seed)

    @property
    def dt(self) -> float:
        return self._dt

    def params_for(self, symbol: str) -> dict[str, float]:
        return self._params.get(symbol, DEFAULT_PARAMS)

    def next(self, symbol: str, previous_price: float) -> float:
        """Advance one symbol by one time step.

        This is the hot path: called once per symbol every tick.
        """
        if previous_price <= 0:
            raise ValueError(f"{symbol}: previous price must be positive, got {previous_price}")

        params = self.params_for(symbol)
        mu = params["mu"]
        sigma = params["sigma"]

        drift = (mu - 0.5 * sigma**2) * self._dt
        diffusion = sigma * math.sqrt(self._dt) * self._rng.standard_normal()
        price = previous_price * math.exp(drift + diffusion)

        if self._rng.random() < self._event_prob:
            shock_magnitude = self._rng.uniform(0.02, 0.05)
            shock_sign = 1 if self._rng.random() < 0.5 else -1
            price *= 1 + shock_magnitude * shock_sign
            logger.debug(
                "Random event on %s: %.1f%% %s",
                symbol,
                shock_magnitude * 100,
                "up" if shock_sign > 0 else "down",
            )

        return price
