"""Domain enums.

Available Enums:
    - OrderStatus: Order lifecycle states
    - PaymentType, PaymentStatus: Payment details on orders
    - ConnectionState: SSE connection lifecycle
"""

from orderstream.domain.enums.connection_state import ConnectionState
from orderstream.domain.enums.order_status import OrderStatus
from orderstream.domain.enums.payment import PaymentStatus, PaymentType

__all__ = [
    "ConnectionState",
    "OrderStatus",
    "PaymentStatus",
    "PaymentType",
]
