"""Tests for fetching the server catalog."""

import httpx
import pytest

from stockstream.client.catalog import fetch_catalog


def _transport(status=200, body=None):
    def handler(request):
        assert request.url.path == "/stock_list.json"
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
class TestFetchCatalog:
    """Tests for fetch_catalog with a mocked HTTP transport."""

    async def test_fetch(self):
        """Test a successful catalog fetch."""
        catalog = await fetch_catalog(
            "http://server:8080/", transport=_transport(body={"AAPL": 100, "MSFT": 200.5})
        )
        assert catalog == {"AAPL": 100.0, "MSFT": 200.5}

    async def test_http_error(self):
        """Test that a server error surfaces as an httpx error."""
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_catalog("http://server:8080", transport=_transport(status=500, body={}))

    @pytest.mark.parametrize("body", [["AAPL"], {"AAPL": "cheap"}, {"AAPL": None}])
    async def test_invalid_body(self, body):
        """Test that a malformed catalog is rejected."""
        with pytest.raises(ValueError):
            await fetch_catalog("http://server:8080", transport=_transport(body=body))
