"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_PREFIX = "STOCKSTREAM_"
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True, slots=True)
class Settings:
    """Tunables for the server and the streaming client.

    Intervals are stored in seconds. The environment variables use
    milliseconds (e.g. STOCKSTREAM_TICK_INTERVAL_MS=25).

    The tick interval and the coalescing window are independent: the server
    pushes at tick cadence and the client smooths delivery at the edge.
    Raising the window lowers consumer load at the cost of latency.
    """

    host: str = "0.0.0.0"
    port: int = 8080
    tick_interval: float = 0.025
    coalesce_window: float = 0.1
    reconnect_base: float = 1.0
    reconnect_cap: float = 30.0
    reconnect_max_attempts: int | None = None  # None = retry forever
    price_precision: int = 2
    send_timeout: float = 1.0
    send_queue_size: int = 8
    catalog_path: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("tick_interval", "coalesce_window", "reconnect_base", "reconnect_cap", "send_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.reconnect_cap < self.reconnect_base:
            raise ValueError("reconnect_cap must not be smaller than reconnect_base")
        if self.price_precision < 0:
            raise ValueError(f"price_precision must be >= 0, got {self.price_precision}")
        if self.send_queue_size < 1:
            raise ValueError(f"send_queue_size must be >= 1, got {self.send_queue_size}")
        if self.reconnect_max_attempts is not None and self.reconnect_max_attempts < 1:
            raise ValueError("reconnect_max_attempts must be >= 1 or None")
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from STOCKSTREAM_* variables. Unset variables keep defaults.

        Raises ValueError on malformed values.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name: str) -> str | None:
            value = env.get(_PREFIX + name, "").strip()
            return value or None

        def millis(name: str, default: float) -> float:
            raw = get(name)
            if raw is None:
                return default
            try:
                return float(raw) / 1000.0
            except ValueError:
                raise ValueError(f"{_PREFIX}{name} must be a number of milliseconds, got {raw!r}") from None

        def integer(name: str, default: int | None) -> int | None:
            raw = get(name)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f"{_PREFIX}{name} must be an integer, got {raw!r}") from None

        max_attempts = integer("RECONNECT_MAX_ATTEMPTS", None)

        return cls(
            host=get("HOST") or defaults.host,
            port=integer("PORT", defaults.port),
            tick_interval=millis("TICK_INTERVAL_MS", defaults.tick_interval),
            coalesce_window=millis("COALESCE_WINDOW_MS", defaults.coalesce_window),
            reconnect_base=millis("RECONNECT_BASE_MS", defaults.reconnect_base),
            reconnect_cap=millis("RECONNECT_CAP_MS", defaults.reconnect_cap),
            reconnect_max_attempts=max_attempts or None,  # 0 means unlimited
            price_precision=integer("PRICE_PRECISION", defaults.price_precision),
            send_timeout=millis("SEND_TIMEOUT_MS", defaults.send_timeout),
            send_queue_size=integer("SEND_QUEUE_SIZE", defaults.send_queue_size),
            catalog_path=get("CATALOG_PATH"),
            log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        )
