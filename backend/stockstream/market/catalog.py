"""Known-symbol catalog: symbol -> initial price, fixed at process start."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from .seed_prices import SEED_PRICES

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """The catalog file is missing, unreadable, or malformed."""


def load_catalog(path: str | Path | None = None) -> dict[str, float]:
    """Load the known-symbol catalog.

    With no path, returns a copy of the built-in SEED_PRICES. Otherwise reads
    a JSON object mapping symbol -> positive initial price, e.g.
    ``{"AAPL": 100.0, "MSFT": 200.0}``.
    """
    if path is None:
        logger.info("Using built-in catalog with %d symbols", len(SEED_PRICES))
        return dict(SEED_PRICES)

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict) or not raw:
        raise CatalogError(f"Catalog {path} must be a non-empty JSON object")

    catalog: dict[str, float] = {}
    for symbol, price in raw.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise CatalogError(f"Initial price for {symbol!r} is not a number: {price!r}")
        if not math.isfinite(price) or price <= 0:
            raise CatalogError(f"Initial price for {symbol!r} must be positive, got {price!r}")
        catalog[symbol] = float(price)

    logger.info("Loaded catalog with %d symbols from %s", len(catalog), path)
    return catalog
