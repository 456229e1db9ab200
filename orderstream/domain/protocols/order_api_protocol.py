"""Orders API protocol.

Port for the REST endpoints the order sources depend on. Implemented by
PartnerOrdersAPIClient; replaced by AsyncMock in tests.
"""

from typing import Protocol

from orderstream.core.result import Result
from orderstream.domain.entities import Order
from orderstream.domain.errors import OrderApiError


class OrderApiProtocol(Protocol):
    """Fetch partner orders from the backend."""

    async def list_orders(
        self, params: dict[str, str] | None = None
    ) -> Result[list[Order], OrderApiError]:
        """Fetch the full order list, normalized to Order entities.

        Args:
            params: Optional query parameters (e.g. status filter).

        Returns:
            Success(list[Order]) or Failure(OrderApiError).
        """
        ...
