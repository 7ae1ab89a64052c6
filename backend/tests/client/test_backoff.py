"""Tests for reconnect backoff."""

import pytest

from stockstream.client.backoff import ExponentialBackoff, reconnect_delay


class TestReconnectDelay:
    """Tests for the delay formula."""

    def test_default_sequence(self):
        """Failures yield 2, 4, 8, 16, 30, 30 seconds with base 1s and cap 30s."""
        delays = [reconnect_delay(attempt, base=1.0, cap=30.0) for attempt in range(1, 8)]
        assert delays == [2.0, 4.0, 8.0, 16.0, 30.0, 30.0, 30.0]

    def test_custom_base_and_cap(self):
        """Test a smaller base and cap."""
        assert [reconnect_delay(a, base=0.5, cap=3.0) for a in range(1, 5)] == [1.0, 2.0, 3.0, 3.0]

    def test_huge_attempt_stays_capped(self):
        """Test that a very long outage still yields the cap."""
        assert reconnect_delay(10_000) == 30.0

    def test_attempt_must_be_positive(self):
        """Test that attempt numbers start at 1."""
        with pytest.raises(ValueError):
            reconnect_delay(0)


class TestExponentialBackoff:
    """Tests for the stateful backoff counter."""

    def test_sequence_and_attempts(self):
        """Test that each call counts one more failure."""
        backoff = ExponentialBackoff()
        assert [backoff.next_delay() for _ in range(6)] == [2.0, 4.0, 8.0, 16.0, 30.0, 30.0]
        assert backoff.attempt == 6

    def test_reset(self):
        """Test that a success starts the sequence over."""
        backoff = ExponentialBackoff()
        backoff.next_delay()
        backoff.next_delay()
        backoff.reset()
        assert backoff.attempt == 0
        assert backoff.next_delay() == 2.0

    def test_unlimited_by_default(self):
        """Test that without a ceiling the backoff never gives up."""
        backoff = ExponentialBackoff()
        for _ in range(1000):
            assert backoff.next_delay() is not None
        assert not backoff.exhausted

    def test_max_attempts(self):
        """Test that the ceiling ends the retries."""
        backoff = ExponentialBackoff(max_attempts=2)
        assert backoff.next_delay() == 2.0
        assert backoff.next_delay() == 4.0
        assert backoff.next_delay() is None
        assert backoff.exhausted
