"""Exponential reconnect backoff."""

from __future__ import annotations


def reconnect_delay(attempt: int, base: float = 1.0, cap: float = 30.0) -> float:
    """Delay before reconnect attempt ``attempt`` (1-based): ``min(base * 2**attempt, cap)``.

    With the defaults the sequence is 2, 4, 8, 16, 30, 30, ... seconds.
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    # Cap the exponent so long outages don't build huge integers
    return min(base * 2 ** min(attempt, 62), cap)


class ExponentialBackoff:
    """Counts consecutive connection failures and yields the next delay.

    ``max_attempts=None`` retries forever. Otherwise ``next_delay`` returns
    None once the ceiling is exceeded, meaning: give up.
    """

    def __init__(self, base: float = 1.0, cap: float = 30.0, max_attempts: int | None = None) -> None:
        self.base = base
        self.cap = cap
        self.max_attempts = max_attempts
        self.attempt = 0

    def next_delay(self) -> float | None:
        self.attempt += 1
        if self.max_attempts is not None and self.attempt > self.max_attempts:
            return None
        return reconnect_delay(self.attempt, self.base, self.cap)

    def reset(self) -> None:
        self.attempt = 0

    @property
    def exhausted(self) -> bool:
        return self.max_attempts is not None and self.attempt > self.max_attempts
