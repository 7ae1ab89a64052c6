"""StockStream: subscription-aware real-time price streaming."""

__version__ = "0.1.0"
