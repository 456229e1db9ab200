"""Order list projection.

Folds order events, full snapshots and optimistic patches into one
immutable, most-recent-first tuple of orders.

Rules:
    NEW_ORDER       → prepend (an existing entry with the same id moves to
                      the front, replaced by the new snapshot)
    ORDER_UPDATED   → replace by id; unknown id is a silent no-op
    ORDER_CANCELLED → remove by id; unknown id is a silent no-op
    replace_all     → wholesale snapshot replacement
    optimistic      → shallow merge; later server events overwrite it

Readers always get a tuple, and every change is published as a single
assignment, so a reader never sees a partially applied change.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

import structlog

from orderstream.domain.entities import Order
from orderstream.domain.events import OrderEvent, OrderEventKind
from orderstream.domain.protocols import LoggerProtocol

ChangeListener = Callable[[tuple[Order, ...]], None]


class OrderListProjection:
    """In-memory order list kept current by events and snapshots."""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        *,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize projection.

        Args:
            orders: Initial snapshot, most recent first.
            logger: Optional logger (module structlog logger if not provided).
        """
        self._orders: tuple[Order, ...] = tuple(orders)
        self._last_update: datetime | None = None
        self._listeners: list[ChangeListener] = []
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def orders(self) -> tuple[Order, ...]:
        """Current snapshot."""
        return self._orders

    @property
    def last_update(self) -> datetime | None:
        """When the snapshot last changed (None before the first change)."""
        return self._last_update

    def get(self, order_id: str) -> Order | None:
        """Look up an order by full id."""
        for order in self._orders:
            if order.full_id == order_id:
                return order
        return None

    def apply(self, event: OrderEvent) -> bool:
        """Apply one order event.

        Args:
            event: Event from the order stream.

        Returns:
            True if the snapshot changed.
        """
        match event.kind:
            case OrderEventKind.NEW_ORDER:
                if event.order is None:
                    return False
                rest = tuple(o for o in self._orders if o.full_id != event.order_id)
                self._publish((event.order, *rest))
                return True

            case OrderEventKind.ORDER_UPDATED:
                if event.order is None or self.get(event.order_id) is None:
                    self._logger.debug("projection_update_unknown_order", order_id=event.order_id)
                    return False
                self._publish(
                    tuple(
                        event.order if o.full_id == event.order_id else o
                        for o in self._orders
                    )
                )
                return True

            case OrderEventKind.ORDER_CANCELLED:
                remaining = tuple(o for o in self._orders if o.full_id != event.order_id)
                if len(remaining) == len(self._orders):
                    return False
                self._publish(remaining)
                return True

        return False

    def replace_all(self, orders: Iterable[Order]) -> None:
        """Replace the whole snapshot."""
        self._publish(tuple(orders))

    def update_order_optimistically(self, order_id: str, **changes: Any) -> bool:
        """Shallow-merge local changes into one order.

        Args:
            order_id: Full id of the order to patch.
            **changes: Order field names and new values.

        Returns:
            True if the order was found and patched.

        Raises:
            TypeError: If a field name does not exist on Order.
        """
        current = self.get(order_id)
        if current is None:
            return False
        patched = current.with_changes(**changes)
        self._publish(tuple(patched if o.full_id == order_id else o for o in self._orders))
        return True

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Called with the new snapshot after every change.

        Returns:
            Idempotent unsubscribe function.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, orders: tuple[Order, ...]) -> None:
        self._orders = orders
        self._last_update = datetime.now(UTC)
        for listener in list(self._listeners):
            try:
                listener(orders)
            except Exception as e:
                self._logger.error(
                    "projection_listener_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
