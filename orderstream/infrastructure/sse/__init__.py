"""SSE client infrastructure.

Components:
- StreamFramer: bytes → SSEFrame
- SSEConnection: one streaming HTTP request → OrderEvent iterator
- OrderStreamService: fan-out, reconnection, lifecycle
"""

from orderstream.infrastructure.sse.order_stream_service import OrderStreamService
from orderstream.infrastructure.sse.sse_connection import SSEConnection
from orderstream.infrastructure.sse.stream_framer import SSEFrame, StreamFramer

__all__ = ["OrderStreamService", "SSEConnection", "SSEFrame", "StreamFramer"]
