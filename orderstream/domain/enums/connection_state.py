"""SSE connection states.

State Machine:
    DISCONNECTED → CONNECTING → CONNECTED → DISCONNECTED

    - DISCONNECTED: No stream (initial, after close, after failure)
    - CONNECTING: Handshake in flight
    - CONNECTED: Response headers received, body being read

A connect attempt while CONNECTING or CONNECTED is a no-op; there is no
CONNECTING → CONNECTING re-entry.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """Lifecycle of a single SSE connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"

    @property
    def is_active(self) -> bool:
        """Whether a connect attempt should be treated as a no-op."""
        return self is not ConnectionState.DISCONNECTED
