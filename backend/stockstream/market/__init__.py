"""Server-side market data subsystem for StockStream.

Public API:
    PriceSnapshot        - Immutable per-tick set of rounded prices
    PriceCache           - Thread-safe store of the latest unrounded prices
    PriceSource          - Abstract interface for price generators
    GBMPriceSource       - Geometric Brownian Motion price generator
    TickScheduler        - Fixed-period snapshot producer
    SubscriptionRegistry - Per-connection subscribed symbols
    Broadcaster          - Subscription-filtered fan-out to connections
    load_catalog         - Known-symbol catalog loader
    create_stream_router - FastAPI router factory for the WebSocket endpoint
"""

from .broadcaster import Broadcaster
from .cache import PriceCache
from .catalog import CatalogError, load_catalog
from .interface import PriceSource
from .models import PriceSnapshot
from .scheduler import TickScheduler
from .simulator import GBMPriceSource
from .stream import create_stream_router
from .subscriptions import SubscriptionRegistry

__all__ = [
    "Broadcaster",
    "CatalogError",
    "GBMPriceSource",
    "PriceCache",
    "PriceSnapshot",
    "PriceSource",
    "SubscriptionRegistry",
    "TickScheduler",
    "create_stream_router",
    "load_catalog",
]
