"""Read-side projections."""

from orderstream.application.projections.order_list_projection import (
    ChangeListener,
    OrderListProjection,
)

__all__ = ["ChangeListener", "OrderListProjection"]
