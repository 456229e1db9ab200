"""Backend order mapper.

The single normalization point between backend JSON and the Order entity.
Both the REST client and the SSE connection go through this module, so
fallback rules live here and nowhere else.

Backend Order Structure:
    {
        "id": "9f1c2a7e-5b1d-4c1e-9a52-0f7f3c1d2e11",
        "customerId": "c-17",
        "customer": {"name": "Asha", "mobile": "9876543210"},
        "address": {"pickup": {"street": "12 MG Road", "landmark": "Near Park", "city": "Pune"}},
        "placedAt": "2026-10-18T09:30:00Z",
        "items": [{"id": "li-1", "laundryItem": {"name": "Shirt"}, "quantity": 3, "price": "40"}],
        "status": "pending",
        "paymentType": "COD",
        "paymentStatus": "pending",
        "totalAmount": "420.00",
        "gst": "20.00",
        "deliveryFee": "30.00",
        "itemsAmount": "370.00",
        "deliveryPartnerId": "",
        "distance": "2.4"
    }

List responses arrive as ``{"data": {"orders": [...]}}``, ``{"orders": [...]}``
or a bare list.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any

import structlog

from orderstream.domain.entities import Order, OrderItem
from orderstream.domain.enums import OrderStatus, PaymentStatus, PaymentType

logger = structlog.get_logger(__name__)


class OrderMapper:
    """Mapper for converting backend order JSON to Order entities.

    This mapper handles:
    - Flattening nested customer/address structures
    - Converting string amounts to Decimal
    - Parsing ISO-8601 placement timestamps
    - Defaulting optional fields the backend omits

    Thread-safe: No mutable state, can be shared.

    Example:
        >>> mapper = OrderMapper()
        >>> order = mapper.map_order({"id": "A-1", "status": "pending"})
        >>> order.full_id
        'A-1'
    """

    def map_order(self, data: Any) -> Order | None:
        """Map one backend order object to an Order.

        Args:
            data: Order object from the backend.

        Returns:
            Order if mapping succeeds, None if data is invalid or missing
            the order id.
        """
        if not isinstance(data, dict):
            logger.warning(
                "order_mapping_unexpected_type",
                data_type=type(data).__name__,
            )
            return None
        try:
            return self._map_order_internal(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(
                "order_mapping_failed",
                order_id=data.get("id"),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def map_orders(self, payload: Any) -> list[Order]:
        """Normalize a list response and map every order in it.

        Orders that fail to map are skipped (and logged).

        Args:
            payload: Decoded JSON body of the list endpoint.

        Returns:
            Mapped orders in backend order.
        """
        orders: list[Order] = []
        for raw in normalize_orders_payload(payload):
            order = self.map_order(raw)
            if order is not None:
                orders.append(order)
        return orders

    def _map_order_internal(self, data: dict[str, Any]) -> Order | None:
        """Internal mapping logic.

        Raises exceptions on invalid data (caught by map_order).
        """
        full_id = str(data.get("id") or "")
        if not full_id:
            logger.debug("order_missing_id")
            return None

        customer = data.get("customer") or {}
        items = tuple(
            self._map_item(item) for item in data.get("items") or [] if isinstance(item, dict)
        )

        return Order(
            full_id=full_id,
            customer_id=str(data.get("customerId") or ""),
            customer_name=customer.get("name") or "Unknown",
            phone_number=customer.get("mobile") or "",
            pickup_address=self._format_pickup_address(data.get("address")),
            placed_at=self._parse_datetime(data.get("placedAt")),
            status=self._parse_enum(OrderStatus, data.get("status"), OrderStatus.PENDING),
            payment_type=self._parse_enum(PaymentType, data.get("paymentType"), PaymentType.COD),
            payment_status=self._parse_enum(
                PaymentStatus, data.get("paymentStatus"), PaymentStatus.PENDING
            ),
            total_amount=self._parse_decimal(data.get("totalAmount")),
            gst=self._parse_decimal(data.get("gst")),
            delivery_fee=self._parse_decimal(data.get("deliveryFee")),
            items_amount=self._parse_decimal(data.get("itemsAmount")),
            distance=self._parse_decimal(data.get("distance")),
            delivery_partner_id=str(data.get("deliveryPartnerId") or ""),
            items=items,
        )

    def _map_item(self, item: dict[str, Any]) -> OrderItem:
        laundry_item = item.get("laundryItem") or {}
        return OrderItem(
            id=str(item.get("id") or ""),
            name=laundry_item.get("name") or item.get("name") or "Unknown Item",
            quantity=int(item.get("quantity") or 1),
            price=self._parse_decimal(item.get("price") or laundry_item.get("price")),
        )

    def _format_pickup_address(self, address: Any) -> str:
        """Join street, landmark and city into one line.

        Returns:
            Comma-separated address, "No address" when all parts are empty.
        """
        pickup = (address or {}).get("pickup") or {}
        parts = [
            str(pickup.get(key) or "").strip() for key in ("street", "landmark", "city")
        ]
        line = ", ".join(part for part in parts if part)
        return line or "No address"

    def _parse_decimal(self, value: Any) -> Decimal:
        """Parse numeric value to Decimal.

        Args:
            value: Numeric value (int, float, str, or None).

        Returns:
            Decimal representation, Decimal("0") for None/invalid.
        """
        if value is None or value == "":
            return Decimal("0")

        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            logger.warning(
                "order_invalid_decimal_value",
                value=value,
                value_type=type(value).__name__,
            )
            return Decimal("0")

    def _parse_datetime(self, value: Any) -> datetime | None:
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            logger.warning("order_invalid_placed_at", value=value)
            return None

    def _parse_enum(self, enum_cls: type[StrEnum], value: Any, default: StrEnum) -> Any:
        if not value:
            return default
        try:
            return enum_cls(value)
        except ValueError:
            logger.debug("order_unknown_enum_value", field=enum_cls.__name__, value=value)
            return default


def normalize_orders_payload(payload: Any) -> list[Any]:
    """Extract the raw order list from any accepted response shape.

    Args:
        payload: Decoded JSON body.

    Returns:
        Raw order objects (empty list when no list is found).
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("orders"), list):
        return data["orders"]
    if isinstance(payload.get("orders"), list):
        return payload["orders"]
    return []


def normalize_order_payload(payload: Any) -> Any:
    """Extract one raw order from a single-order response.

    Accepts ``{"data": {"order": {...}}}``, ``{"order": {...}}``,
    ``{"data": {...}}`` or the bare order object.
    """
    if not isinstance(payload, dict):
        return payload

    data = payload.get("data")
    if isinstance(data, dict):
        return data.get("order") if isinstance(data.get("order"), dict) else data
    if isinstance(payload.get("order"), dict):
        return payload["order"]
    return payload
