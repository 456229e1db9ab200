"""SSE stream error types.

Returned (not raised) by SSEConnection.open() when a handshake cannot
complete. OrderStreamService treats every StreamError the same way: it
feeds the reconnect decision.

Usage:
    result = await connection.open(url, token)
    if isinstance(result, Failure):
        logger.warning("sse_connect_failed", error=str(result.error))
"""

from dataclasses import dataclass

from orderstream.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class StreamError(DomainError):
    """SSE handshake or transport failure.

    Attributes:
        code: ErrorCode (SSE_*).
        message: Human-readable message.
        url: Stream URL that was attempted.
        status_code: HTTP status when the server answered with an error.
    """

    url: str = ""
    status_code: int | None = None
