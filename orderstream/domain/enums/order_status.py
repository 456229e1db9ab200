"""Order lifecycle states.

State Machine:
    PENDING → CONFIRMED → PICKUP_SCHEDULED → PICKED_UP → IN_PROCESS
        → READY_FOR_DELIVERY → OUT_FOR_DELIVERY → DELIVERED

    PENDING → REJECTED (partner declined)
    Any non-terminal → FAILED

Usage:
    from orderstream.domain.enums import OrderStatus

    if order.status.is_terminal:
        ...
"""

from enum import StrEnum


class OrderStatus(StrEnum):
    """Order lifecycle states (backend wire values)."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PICKUP_SCHEDULED = "pickup_scheduled"
    PICKED_UP = "picked_up"
    IN_PROCESS = "in_process"
    READY_FOR_DELIVERY = "ready_for_delivery"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether the order can no longer change state."""
        return self in _TERMINAL_STATES

    @classmethod
    def terminal_states(cls) -> list["OrderStatus"]:
        """Get terminal states.

        Returns:
            list[OrderStatus]: DELIVERED, REJECTED, FAILED.
        """
        return [cls.DELIVERED, cls.REJECTED, cls.FAILED]


_TERMINAL_STATES = frozenset(OrderStatus.terminal_states())
