"""Domain value objects."""

from orderstream.domain.value_objects.reconnect_policy import (
    ReconnectPolicy,
    next_delay,
    should_retry,
)

__all__ = ["ReconnectPolicy", "next_delay", "should_retry"]
