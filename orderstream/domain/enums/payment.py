"""Payment enums carried on orders."""

from enum import StrEnum


class PaymentType(StrEnum):
    """How the customer pays."""

    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(StrEnum):
    """Payment settlement state."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
