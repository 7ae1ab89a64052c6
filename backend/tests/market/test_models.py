"""Tests for PriceSnapshot."""

import pytest

from stockstream.market.models import PriceSnapshot


class TestPriceSnapshot:
    """Unit tests for the PriceSnapshot model."""

    def test_creation(self):
        """Test basic PriceSnapshot creation."""
        snap = PriceSnapshot(seq=1, prices={"AAPL": 100.5}, timestamp=1234567890.0)
        assert snap.seq == 1
        assert snap.prices["AAPL"] == 100.5
        assert snap.timestamp == 1234567890.0

    def test_restrict_is_intersection(self):
        """Test that restrict() keeps only symbols in both sets."""
        snap = PriceSnapshot(seq=1, prices={"AAPL": 100.5, "MSFT": 199.8})
        assert snap.restrict({"AAPL", "TSLA"}) == {"AAPL": 100.5}

    def test_restrict_empty(self):
        """Test that a disjoint subscription yields nothing."""
        snap = PriceSnapshot(seq=1, prices={"AAPL": 100.5})
        assert snap.restrict(set()) == {}
        assert snap.restrict({"TYPO"}) == {}

    def test_prices_are_read_only(self):
        """Test that the prices mapping cannot be mutated."""
        snap = PriceSnapshot(seq=1, prices={"AAPL": 100.5})
        with pytest.raises(TypeError):
            snap.prices["AAPL"] = 0.0  # type: ignore[index]

    def test_input_dict_is_copied(self):
        """Test that later changes to the source dict do not leak in."""
        source = {"AAPL": 100.5}
        snap = PriceSnapshot(seq=1, prices=source)
        source["MSFT"] = 1.0
        assert "MSFT" not in snap

    def test_immutability(self):
        """Test that PriceSnapshot fields cannot be reassigned."""
        snap = PriceSnapshot(seq=1, prices={})
        with pytest.raises(AttributeError):
            snap.seq = 2  # Should raise error

    def test_len(self):
        """Test __len__."""
        assert len(PriceSnapshot(seq=1, prices={"A": 1.0, "B": 2.0})) == 2
