"""Backend JSON → domain entity mappers."""

from orderstream.infrastructure.mappers.order_mapper import (
    OrderMapper,
    normalize_order_payload,
    normalize_orders_payload,
)

__all__ = ["OrderMapper", "normalize_order_payload", "normalize_orders_payload"]
