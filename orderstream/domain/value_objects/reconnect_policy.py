"""Reconnect policy value object.

Exponential backoff for SSE reconnection. The decision is a pure mapping
from attempt number to delay, so it can be tested without any clock.

    delay(attempt) = min(initial * 2 ** (attempt - 1), maximum)

With initial=1000 ms and maximum=30000 ms:
    attempt 1 → 1000, 2 → 2000, 3 → 4000, 4 → 8000, 5 → 16000, 6+ → 30000

Usage:
    from orderstream.domain.value_objects import ReconnectPolicy

    policy = ReconnectPolicy(initial_delay_ms=1000, max_delay_ms=30000, max_attempts=5)
    if policy.should_retry(attempt):
        loop.call_later(policy.next_delay(attempt) / 1000, reconnect)
"""

from dataclasses import dataclass

from orderstream.core.constants import (
    SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT,
    SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT,
    SSE_MAX_RECONNECT_DELAY_MS_DEFAULT,
)


def next_delay(attempt: int, base: int, maximum: int) -> int:
    """Compute the delay before a reconnect attempt.

    Args:
        attempt: 1-based attempt number.
        base: Delay of the first attempt.
        maximum: Upper bound on the delay.

    Returns:
        ``base * 2 ** (attempt - 1)`` clamped to ``maximum``.

    Raises:
        ValueError: If attempt is lower than 1.
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    return min(base * 2 ** (attempt - 1), maximum)


def should_retry(attempt: int, max_attempts: int) -> bool:
    """Whether attempt number ``attempt`` is still allowed."""
    return attempt <= max_attempts


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconnectPolicy:
    """Exponential backoff configuration (value object).

    Attributes:
        initial_delay_ms: Delay before the first retry.
        max_delay_ms: Upper bound on any retry delay.
        max_attempts: Retries allowed before giving up.

    Raises:
        ValueError: If any value is negative.
    """

    initial_delay_ms: int = SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT
    max_delay_ms: int = SSE_MAX_RECONNECT_DELAY_MS_DEFAULT
    max_attempts: int = SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.initial_delay_ms < 0:
            raise ValueError(f"initial_delay_ms must not be negative, got {self.initial_delay_ms}")
        if self.max_delay_ms < 0:
            raise ValueError(f"max_delay_ms must not be negative, got {self.max_delay_ms}")
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must not be negative, got {self.max_attempts}")

    def next_delay(self, attempt: int) -> int:
        """Delay in milliseconds before ``attempt``."""
        return next_delay(attempt, self.initial_delay_ms, self.max_delay_ms)

    def should_retry(self, attempt: int) -> bool:
        """Whether ``attempt`` is within the allowed number of retries."""
        return should_retry(attempt, self.max_attempts)
