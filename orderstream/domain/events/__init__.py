"""Domain events."""

from orderstream.domain.events.order_event import OrderEvent, OrderEventKind

__all__ = ["OrderEvent", "OrderEventKind"]
