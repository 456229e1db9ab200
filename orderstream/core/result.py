"""Result types for railway-oriented programming.

Operations that can fail (REST fetches, SSE handshakes) return a Result
instead of raising, so callers handle failure explicitly.

Usage:
    result = await api_client.list_orders()
    match result:
        case Success(value=orders):
            projection.replace_all(orders)
        case Failure(error=error):
            logger.warning("orders_fetch_failed", error=str(error))
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
