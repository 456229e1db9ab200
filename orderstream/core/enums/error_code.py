"""Machine-readable error codes.

Codes follow the ENTITY_ACTION_REASON naming convention and travel inside
DomainError instances returned in Failure results.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # SSE stream errors
    SSE_TOKEN_MISSING = "sse_token_missing"
    SSE_ALREADY_OPEN = "sse_already_open"
    SSE_HANDSHAKE_FAILED = "sse_handshake_failed"
    SSE_HANDSHAKE_TIMEOUT = "sse_handshake_timeout"
    SSE_TRANSPORT_FAILED = "sse_transport_failed"

    # Orders API errors
    ORDERS_API_UNAVAILABLE = "orders_api_unavailable"
    ORDERS_API_AUTHENTICATION_FAILED = "orders_api_authentication_failed"
    ORDERS_API_REQUEST_REJECTED = "orders_api_request_rejected"
    ORDERS_API_INVALID_RESPONSE = "orders_api_invalid_response"
    ORDER_NOT_FOUND = "order_not_found"
