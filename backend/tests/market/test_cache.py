"""Tests for PriceCache."""

from stockstream.market.cache import PriceCache


class TestPriceCache:
    """Unit tests for the PriceCache."""

    def test_empty_cache(self):
        """Test that a new cache holds no prices."""
        assert PriceCache().get_all() == {}

    def test_seed_replaces_contents(self):
        """Test that seed() replaces everything."""
        cache = PriceCache()
        cache.update_many({"TSLA": 170.0})
        cache.seed({"AAPL": 100.0, "MSFT": 200.0})
        assert cache.get_all() == {"AAPL": 100.0, "MSFT": 200.0}

    def test_update_many(self):
        """Test writing several prices at once."""
        cache = PriceCache()
        cache.seed({"AAPL": 1.0, "MSFT": 2.0})
        cache.update_many({"AAPL": 1.5})
        assert cache.get_all() == {"AAPL": 1.5, "MSFT": 2.0}

    def test_prices_kept_at_full_precision(self):
        """Test that the cache does not round."""
        cache = PriceCache()
        cache.update_many({"AAPL": 190.12345})
        assert cache.get_all()["AAPL"] == 190.12345

    def test_update_many_empty_is_noop(self):
        """Test that an empty batch leaves the contents alone."""
        cache = PriceCache()
        cache.seed({"AAPL": 190.0})
        cache.update_many({})
        assert cache.get_all() == {"AAPL": 190.0}

    def test_get_all_is_a_copy(self):
        """Test that mutating the returned dict does not touch the cache."""
        cache = PriceCache()
        cache.seed({"AAPL": 190.00})
        prices = cache.get_all()
        prices["AAPL"] = 0.0
        assert cache.get_all()["AAPL"] == 190.00
