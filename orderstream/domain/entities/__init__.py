"""Domain entities."""

from orderstream.domain.entities.order import Order, OrderItem

__all__ = ["Order", "OrderItem"]
