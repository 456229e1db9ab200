"""Order domain entity.

Represents one laundry order as seen by the partner. Orders are created by
the backend; this client only mirrors them (initial fetch, SSE events,
polling snapshots) and may patch them locally while an action is pending.

Architecture:
    - Frozen dataclass: every change produces a new instance
    - Keyed by ``full_id`` (the backend identifier)
    - Monetary fields use Decimal, never float

Usage:
    from decimal import Decimal
    from orderstream.domain.entities import Order
    from orderstream.domain.enums import OrderStatus

    order = Order(
        full_id="9f1c2a7e-5b1d-4c1e-9a52-0f7f3c1d2e11",
        customer_name="Asha",
        status=OrderStatus.PENDING,
        total_amount=Decimal("420.00"),
    )
    confirmed = order.with_changes(status="confirmed")
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from orderstream.domain.enums import OrderStatus, PaymentStatus, PaymentType

_DECIMAL_FIELDS = frozenset(
    {"total_amount", "gst", "delivery_fee", "items_amount", "distance"}
)


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderItem:
    """Line item of an order.

    Attributes:
        id: Backend line item id (may be empty).
        name: Display name of the laundry item.
        quantity: Number of pieces.
        price: Unit price.
    """

    id: str = ""
    name: str = "Unknown Item"
    quantity: int = 1
    price: Decimal = Decimal("0")


@dataclass(frozen=True, slots=True, kw_only=True)
class Order:
    """Laundry order mirrored from the backend.

    Attributes:
        full_id: Backend order id, stable across the lifecycle (projection key).
        customer_id: Backend customer id.
        customer_name: Customer display name.
        phone_number: Customer mobile number.
        pickup_address: Single-line pickup address.
        placed_at: When the order was placed (None if unknown).
        status: Lifecycle state.
        payment_type: COD or ONLINE.
        payment_status: Payment settlement state.
        total_amount: Amount charged to the customer.
        gst: Tax component.
        delivery_fee: Delivery component.
        items_amount: Sum of line items.
        distance: Distance to the pickup address.
        delivery_partner_id: Assigned delivery partner (empty if none).
        items: Line items.
    """

    full_id: str
    customer_id: str = ""
    customer_name: str = "Unknown"
    phone_number: str = ""
    pickup_address: str = "No address"
    placed_at: datetime | None = None
    status: OrderStatus = OrderStatus.PENDING
    payment_type: PaymentType = PaymentType.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    total_amount: Decimal = Decimal("0")
    gst: Decimal = Decimal("0")
    delivery_fee: Decimal = Decimal("0")
    items_amount: Decimal = Decimal("0")
    distance: Decimal = Decimal("0")
    delivery_partner_id: str = ""
    items: tuple[OrderItem, ...] = ()

    def __post_init__(self) -> None:
        """Validate identity.

        Raises:
            ValueError: If full_id is empty.
        """
        if not self.full_id:
            raise ValueError("Order full_id must not be empty")

    @property
    def id(self) -> str:
        """Short display id (first dash-separated segment of full_id)."""
        return self.full_id.split("-")[0]

    @property
    def item_count(self) -> int:
        """Number of line items."""
        return len(self.items)

    @property
    def pickup_date(self) -> str:
        """Placement date as ISO string (empty if unknown)."""
        return self.placed_at.date().isoformat() if self.placed_at else ""

    @property
    def pickup_time(self) -> str:
        """Placement time as HH:MM (empty if unknown)."""
        return self.placed_at.strftime("%H:%M") if self.placed_at else ""

    def with_changes(self, **changes: Any) -> "Order":
        """Return a copy with the given fields shallow-merged in.

        Status and payment values may be given as plain strings; monetary
        values may be given as int, float or str.

        Args:
            **changes: Field names and new values.

        Returns:
            New Order instance (self is unchanged).

        Raises:
            TypeError: If a field name does not exist on Order.
            ValueError: If a status value is unknown or full_id is changed.
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown order fields: {sorted(unknown)}")
        if "full_id" in changes and changes["full_id"] != self.full_id:
            raise ValueError("full_id cannot be changed")

        coerced = dict(changes)
        if "status" in coerced:
            coerced["status"] = OrderStatus(coerced["status"])
        if "payment_type" in coerced:
            coerced["payment_type"] = PaymentType(coerced["payment_type"])
        if "payment_status" in coerced:
            coerced["payment_status"] = PaymentStatus(coerced["payment_status"])
        for name in _DECIMAL_FIELDS & coerced.keys():
            coerced[name] = Decimal(str(coerced[name]))
        if "items" in coerced:
            coerced["items"] = tuple(coerced["items"])

        return replace(self, **coerced)
