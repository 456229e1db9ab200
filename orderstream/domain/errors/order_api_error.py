"""Orders REST API error types.

Usage:
    result = await api_client.list_orders()
    if isinstance(result, Failure) and result.error.is_transient:
        # retry on the next poll
"""

from dataclasses import dataclass

from orderstream.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderApiError(DomainError):
    """Orders backend call failed.

    Attributes:
        code: ErrorCode (ORDERS_API_*, ORDER_NOT_FOUND).
        message: Human-readable message (backend message when available).
        status_code: HTTP status code (None for transport errors).
        is_transient: Whether retrying later may succeed.
    """

    status_code: int | None = None
    is_transient: bool = False
