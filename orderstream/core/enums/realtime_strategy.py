"""Real-time delivery strategies.

- SSE: Server-Sent Events stream with reconnection backoff
- POLLING: periodic full refetch of the order list
"""

from enum import StrEnum


class RealTimeStrategy(StrEnum):
    """How order updates reach the client."""

    SSE = "sse"
    POLLING = "polling"
