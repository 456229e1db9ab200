"""Domain error types.

Usage:
    from orderstream.domain.errors import OrderApiError, StreamError
"""

from orderstream.domain.errors.order_api_error import OrderApiError
from orderstream.domain.errors.stream_error import StreamError

__all__ = ["OrderApiError", "StreamError"]
