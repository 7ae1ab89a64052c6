"""Fetch the server's known-symbol catalog."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


async def fetch_catalog(
    base_url: str,
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, float]:
    """GET ``/stock_list.json`` from the server: symbol -> initial price.

    Raises httpx.HTTPError on transport or status failures and ValueError
    when the body is not a JSON object of numbers.
    """
    url = base_url.rstrip("/") + "/stock_list.json"
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(url)
        response.raise_for_status()
        data = response.json()

    if not isinstance(data, dict):
        raise ValueError(f"Catalog from {url} is not a JSON object")
    catalog: dict[str, float] = {}
    for symbol, price in data.items():
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ValueError(f"Catalog price for {symbol!r} is not a number: {price!r}")
        catalog[str(symbol)] = float(price)
    logger.info("Fetched catalog with %d symbols from %s", len(catalog), url)
    return catalog
