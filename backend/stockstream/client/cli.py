"""Console entry point: ``stockstream-client``.

Connects to a StockStream server, subscribes to symbols, and logs each
coalesced batch of prices along with connection status changes.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

import httpx

from ..config import Settings
from .backoff import ExponentialBackoff
from .catalog import fetch_catalog
from .session import StreamSession

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream live prices from a StockStream server")
    parser.add_argument("symbols", nargs="*", help="symbols to watch (default: the whole catalog)")
    parser.add_argument("--server", default="localhost:8080", help="host:port of the server")
    return parser.parse_args(argv)


def _print_update(prices: dict[str, float]) -> None:
    line = "  ".join(f"{symbol}={price:.2f}" for symbol, price in sorted(prices.items()))
    print(line, flush=True)


def _print_status(connected: bool, message: str | None, will_retry: bool) -> None:
    if connected:
        logger.info("Connected")
    elif will_retry:
        logger.warning("%s", message)
    else:
        logger.error("%s", message or "Cannot connect to server.")


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    try:
        catalog = await fetch_catalog(f"http://{args.server}")
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error fetching stock list: %s", e)
        return 1

    symbols = args.symbols or sorted(catalog)
    unknown = sorted(set(symbols) - set(catalog))
    if unknown:
        logger.warning("Not in the server catalog, will never update: %s", ", ".join(unknown))

    session = StreamSession(
        f"ws://{args.server}/",
        on_update=_print_update,
        on_connection_status=_print_status,
        on_error=lambda message: logger.error("Server error: %s", message),
        coalesce_window=settings.coalesce_window,
        backoff=ExponentialBackoff(
            base=settings.reconnect_base,
            cap=settings.reconnect_cap,
            max_attempts=settings.reconnect_max_attempts,
        ),
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:  # Windows
            pass

    await session.subscribe(symbols)
    await session.start()
    try:
        await stop.wait()
    finally:
        await session.stop()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(_main(args, settings)))


if __name__ == "__main__":
    main()
