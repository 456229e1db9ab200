"""Partner orders REST client.

Endpoints:
    GET   {base}/partner/orders            → list (optionally filtered)
    GET   {base}/partner/orders/{id}       → single order
    PATCH {base}/partner/orders/{id}/status → status transition

The bearer token is read from the token store on every call, so a token
refreshed by the host app is picked up without rebuilding the client.
Response bodies are normalized once here, through OrderMapper.
"""

from typing import Any

import httpx

from orderstream.core.constants import BEARER_PREFIX, REQUEST_TIMEOUT_SECONDS_DEFAULT
from orderstream.core.enums import ErrorCode
from orderstream.core.result import Failure, Result, Success
from orderstream.domain.entities import Order
from orderstream.domain.enums import OrderStatus
from orderstream.domain.errors import OrderApiError
from orderstream.domain.protocols import TokenStoreProtocol
from orderstream.infrastructure.api.base_api_client import BaseAPIClient
from orderstream.infrastructure.mappers import OrderMapper, normalize_order_payload


class PartnerOrdersAPIClient(BaseAPIClient):
    """Orders backend client for the logged-in partner.

    Implements OrderApiProtocol.

    Example:
        >>> client = PartnerOrdersAPIClient(
        ...     base_url="https://backend.example.com/api",
        ...     token_store=storage,
        ... )
        >>> result = await client.list_orders({"status": "pending"})
    """

    def __init__(
        self,
        *,
        base_url: str,
        token_store: TokenStoreProtocol,
        orders_path: str = "/partner/orders",
        timeout: float = REQUEST_TIMEOUT_SECONDS_DEFAULT,
        mapper: OrderMapper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Backend API base URL.
            token_store: Source of the bearer token.
            orders_path: Path of the order list endpoint.
            timeout: HTTP request timeout in seconds.
            mapper: Order mapper (new instance if not provided).
            transport: Optional httpx transport override.
        """
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self._token_store = token_store
        self._orders_path = orders_path.rstrip("/")
        self._mapper = mapper or OrderMapper()

    async def list_orders(
        self, params: dict[str, str] | None = None
    ) -> Result[list[Order], OrderApiError]:
        """Fetch the partner's orders.

        Args:
            params: Optional query parameters (e.g. ``{"status": "pending"}``).

        Returns:
            Success(list[Order]) in backend order, Failure(OrderApiError).
        """
        headers = await self._auth_headers()
        if isinstance(headers, Failure):
            return headers

        result = await self._execute_and_parse(
            method="GET",
            path=self._orders_path,
            headers=headers.value,
            params=params,
            operation="list_orders",
        )
        if isinstance(result, Failure):
            return result

        orders = self._mapper.map_orders(result.value)
        self._logger.debug("orders_listed", count=len(orders))
        return Success(value=orders)

    async def get_order(self, order_id: str) -> Result[Order, OrderApiError]:
        """Fetch one order by backend id.

        Returns:
            Success(Order), or Failure(OrderApiError) with ORDER_NOT_FOUND
            on 404 and ORDERS_API_INVALID_RESPONSE on an unmappable body.
        """
        headers = await self._auth_headers()
        if isinstance(headers, Failure):
            return headers

        result = await self._execute_and_parse(
            method="GET",
            path=f"{self._orders_path}/{order_id}",
            headers=headers.value,
            operation="get_order",
        )
        if isinstance(result, Failure):
            return result
        return self._to_order(result.value, "get_order")

    async def update_order_status(
        self, order_id: str, status: OrderStatus | str, **extra: Any
    ) -> Result[Order | None, OrderApiError]:
        """Request a status transition.

        Args:
            order_id: Backend order id.
            status: Target status.
            **extra: Additional body fields sent alongside ``status``.

        Returns:
            Success(Order) when the backend echoes the order, Success(None)
            when it only acknowledges, Failure(OrderApiError) otherwise.
        """
        target = OrderStatus(status)
        headers = await self._auth_headers()
        if isinstance(headers, Failure):
            return headers

        result = await self._execute_and_parse(
            method="PATCH",
            path=f"{self._orders_path}/{order_id}/status",
            headers=headers.value,
            json_data={"status": target.value, **extra},
            operation="update_order_status",
        )
        if isinstance(result, Failure):
            return result

        self._logger.info(
            "order_status_update_requested",
            order_id=order_id,
            status=target.value,
        )
        order = self._mapper.map_order(normalize_order_payload(result.value))
        return Success(value=order)

    async def _auth_headers(self) -> Result[dict[str, str], OrderApiError]:
        """Build request headers with the current bearer token.

        Returns:
            Success(headers), or Failure(OrderApiError) (transient) when the
            token store cannot be read.
        """
        headers = {"Content-Type": "application/json"}
        try:
            token = await self._token_store.get_token()
        except Exception as e:
            self._logger.warning(
                "orders_api_token_read_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_UNAVAILABLE,
                    message=f"Token store failed: {type(e).__name__}",
                    is_transient=True,
                )
            )
        if token:
            headers["Authorization"] = f"{BEARER_PREFIX}{token}"
        return Success(value=headers)

    def _to_order(self, payload: Any, operation: str) -> Result[Order, OrderApiError]:
        order = self._mapper.map_order(normalize_order_payload(payload))
        if order is None:
            self._logger.warning("orders_api_unmappable_order", operation=operation)
            return Failure(
                error=OrderApiError(
                    code=ErrorCode.ORDERS_API_INVALID_RESPONSE,
                    message="Order response could not be mapped",
                )
            )
        return Success(value=order)
