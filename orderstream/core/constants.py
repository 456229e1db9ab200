"""Centralized constants for internal implementation details.

These are protocol and implementation constants, NOT environment-specific
configuration. For tunable settings use `orderstream.core.config`.

Categories:
- Prefixes and headers for the SSE handshake
- SSE wire event names
- Defaults for reconnection and polling
- Limits
"""

# =============================================================================
# Prefixes and Headers
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""

SSE_ACCEPT_HEADER: str = "text/event-stream"
"""Accept header value for the SSE handshake."""

SSE_CACHE_CONTROL_HEADER: str = "no-cache"
"""Cache-Control header value for the SSE handshake."""


# =============================================================================
# SSE Wire Format
# =============================================================================

SSE_FRAME_DELIMITER: str = "\n\n"
"""Blank line separating SSE frames."""

SSE_EVENT_FIELD: str = "event:"
SSE_DATA_FIELD: str = "data:"

SSE_CONNECTED_EVENT: str = "connected"
"""Sent by the server once the stream is open (liveness only)."""

SSE_HEARTBEAT_EVENT: str = "heartbeat"
"""Periodic keep-alive frame (liveness only)."""

SSE_LIVENESS_EVENTS: frozenset[str] = frozenset(
    {SSE_CONNECTED_EVENT, SSE_HEARTBEAT_EVENT}
)
"""Event types consumed by the framer without producing a domain event."""


# =============================================================================
# Reconnection and Polling Defaults
# =============================================================================

SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT: int = 5
SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT: int = 1000
SSE_MAX_RECONNECT_DELAY_MS_DEFAULT: int = 30000
SSE_HEARTBEAT_INTERVAL_MS_DEFAULT: int = 30000

SSE_STALE_HEARTBEAT_MULTIPLIER: int = 2
"""A stream silent for this many heartbeat intervals is treated as dead."""

SSE_HANDSHAKE_TIMEOUT_SECONDS_DEFAULT: float = 10.0
"""Upper bound on the SSE handshake (request sent to response headers)."""

POLLING_INTERVAL_MS_DEFAULT: int = 30000

REQUEST_TIMEOUT_SECONDS_DEFAULT: float = 30.0
"""Default timeout for REST calls to the orders backend."""


# =============================================================================
# Storage Keys
# =============================================================================

STORAGE_TOKEN_KEY: str = "token"
STORAGE_PARTNER_KEY: str = "partner"


# =============================================================================
# Limits
# =============================================================================

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum length for response body in error details (truncation limit)."""

SSE_ROLLOUT_BUCKETS: int = 100
"""Number of buckets used for percentage rollout of SSE per partner."""
