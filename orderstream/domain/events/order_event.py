"""Real-time order events.

OrderEvent is the unit of real-time information delivered by the SSE
stream. It is distinct from the wire frame: the SSE connection maps each
``(event_type, payload)`` frame to an OrderEvent after normalizing the
order snapshot.

Wire event names:
    new_order       → OrderEventKind.NEW_ORDER
    order_updated   → OrderEventKind.ORDER_UPDATED
    order_cancelled → OrderEventKind.ORDER_CANCELLED

Invariants:
    - order_id is non-empty for every kind
    - order is present unless kind is ORDER_CANCELLED
"""

from dataclasses import dataclass
from enum import StrEnum

from orderstream.domain.entities import Order


class OrderEventKind(StrEnum):
    """Closed set of order event kinds (values are SSE event names)."""

    NEW_ORDER = "new_order"
    ORDER_UPDATED = "order_updated"
    ORDER_CANCELLED = "order_cancelled"

    @classmethod
    def from_wire(cls, event_type: str) -> "OrderEventKind | None":
        """Look up a kind by SSE event name.

        Args:
            event_type: Value of the ``event:`` line.

        Returns:
            Matching kind, or None for unknown event types.
        """
        try:
            return cls(event_type)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderEvent:
    """A create/update/cancel notification for one order.

    Attributes:
        kind: What happened to the order.
        order_id: Backend id of the affected order.
        order: Full snapshot (absent for cancellations).
        message: Human-readable note, informational only.

    Raises:
        ValueError: If order_id is empty, or order is missing for a
            non-cancellation event.
    """

    kind: OrderEventKind
    order_id: str
    order: Order | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        """Enforce event invariants."""
        if not self.order_id:
            raise ValueError(f"{self.kind.value} event requires a non-empty order_id")
        if self.order is None and self.kind is not OrderEventKind.ORDER_CANCELLED:
            raise ValueError(f"{self.kind.value} event requires an order snapshot")
