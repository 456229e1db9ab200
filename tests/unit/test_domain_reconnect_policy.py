"""Unit tests for the reconnect policy.

Tests cover:
- next_delay() exponential growth and clamping
- should_retry() boundary
- ReconnectPolicy validation and delegation
"""

import pytest

from orderstream.domain.value_objects import ReconnectPolicy, next_delay, should_retry


@pytest.mark.unit
class TestNextDelay:
    """Test the pure backoff function."""

    @pytest.mark.parametrize(
        ("attempt", "expected"),
        [(1, 1000), (2, 2000), (3, 4000), (4, 8000), (5, 16000), (6, 30000), (20, 30000)],
    )
    def test_doubles_from_base_and_clamps_to_maximum(self, attempt, expected):
        assert next_delay(attempt, 1000, 30000) == expected

    def test_never_exceeds_maximum(self):
        delays = [next_delay(n, 250, 5000) for n in range(1, 30)]

        assert max(delays) == 5000
        assert delays == sorted(delays)

    @pytest.mark.parametrize("attempt", [0, -1])
    def test_rejects_attempt_below_one(self, attempt):
        with pytest.raises(ValueError, match="attempt must be >= 1"):
            next_delay(attempt, 1000, 30000)


@pytest.mark.unit
class TestShouldRetry:
    """Test the retry boundary."""

    def test_allows_attempts_up_to_max(self):
        assert should_retry(1, 5) is True
        assert should_retry(5, 5) is True

    def test_rejects_attempt_past_max(self):
        assert should_retry(6, 5) is False

    def test_zero_max_attempts_never_retries(self):
        assert should_retry(1, 0) is False


@pytest.mark.unit
class TestReconnectPolicy:
    """Test the value object."""

    def test_defaults(self):
        policy = ReconnectPolicy()

        assert policy.initial_delay_ms == 1000
        assert policy.max_delay_ms == 30000
        assert policy.max_attempts == 5

    def test_delegates_to_pure_functions(self):
        policy = ReconnectPolicy(initial_delay_ms=500, max_delay_ms=3000, max_attempts=2)

        assert policy.next_delay(1) == 500
        assert policy.next_delay(4) == 3000
        assert policy.should_retry(2) is True
        assert policy.should_retry(3) is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"initial_delay_ms": -1},
            {"max_delay_ms": -1},
            {"max_attempts": -1},
        ],
    )
    def test_rejects_negative_values(self, kwargs):
        with pytest.raises(ValueError, match="must not be negative"):
            ReconnectPolicy(**kwargs)

    def test_is_immutable(self):
        policy = ReconnectPolicy()

        with pytest.raises(AttributeError):
            policy.max_attempts = 10  # type: ignore[misc]
