"""Unit tests for OrderMapper and the payload normalizers.

Tests cover:
- Field mapping (nested customer, pickup address, items, amounts)
- Fallbacks for missing or invalid fields
- Rejection of non-objects and orders without an id
- List and single-order response shapes
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from orderstream.domain.enums import OrderStatus, PaymentStatus, PaymentType
from orderstream.infrastructure.mappers import (
    OrderMapper,
    normalize_order_payload,
    normalize_orders_payload,
)
from tests.conftest import order_payload


@pytest.fixture
def mapper() -> OrderMapper:
    return OrderMapper()


@pytest.mark.unit
class TestMapOrder:
    """Test map_order() field mapping."""

    def test_maps_full_payload(self, mapper):
        order = mapper.map_order(order_payload("9f1c2a7e-5b1d"))

        assert order.full_id == "9f1c2a7e-5b1d"
        assert order.id == "9f1c2a7e"
        assert order.customer_id == "c-17"
        assert order.customer_name == "Asha"
        assert order.phone_number == "9876543210"
        assert order.pickup_address == "12 MG Road, Pune"
        assert order.placed_at == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)
        assert order.pickup_date == "2026-10-18"
        assert order.pickup_time == "09:30"
        assert order.status is OrderStatus.PENDING
        assert order.payment_type is PaymentType.COD
        assert order.total_amount == Decimal("420.00")
        assert order.distance == Decimal("2.4")

    def test_maps_items(self, mapper):
        order = mapper.map_order(order_payload())

        (item,) = order.items
        assert item.name == "Shirt"
        assert item.quantity == 3
        assert item.price == Decimal("40")
        assert order.item_count == 1

    def test_minimal_payload_uses_fallbacks(self, mapper):
        order = mapper.map_order({"id": "A-1"})

        assert order.customer_name == "Unknown"
        assert order.pickup_address == "No address"
        assert order.placed_at is None
        assert order.pickup_date == ""
        assert order.status is OrderStatus.PENDING
        assert order.payment_status is PaymentStatus.PENDING
        assert order.total_amount == Decimal("0")
        assert order.items == ()

    def test_unknown_status_defaults_to_pending(self, mapper):
        order = mapper.map_order(order_payload(status="teleported"))

        assert order.status is OrderStatus.PENDING

    @pytest.mark.parametrize("amount", ["abc", None, ""])
    def test_invalid_amounts_become_zero(self, mapper, amount):
        order = mapper.map_order(order_payload(totalAmount=amount))

        assert order.total_amount == Decimal("0")

    def test_invalid_placed_at_is_none(self, mapper):
        order = mapper.map_order(order_payload(placedAt="yesterday"))

        assert order.placed_at is None

    def test_numeric_id_is_stringified(self, mapper):
        order = mapper.map_order(order_payload(1234))

        assert order.full_id == "1234"


@pytest.mark.unit
class TestMapOrderRejects:
    """Test inputs that cannot become an Order."""

    @pytest.mark.parametrize("data", [None, "A-1", ["A-1"], 42])
    def test_non_object(self, mapper, data):
        assert mapper.map_order(data) is None

    def test_missing_id(self, mapper):
        assert mapper.map_order({"status": "pending"}) is None

    def test_malformed_quantity(self, mapper):
        payload = order_payload(items=[{"laundryItem": {"name": "Shirt"}, "quantity": "x"}])

        assert mapper.map_order(payload) is None


@pytest.mark.unit
class TestNormalizers:
    """Test response shape normalization."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"data": {"orders": [1, 2]}}, [1, 2]),
            ({"orders": [1]}, [1]),
            ([3], [3]),
            ({"data": {}}, []),
            ("nope", []),
            (None, []),
        ],
    )
    def test_normalize_orders_payload(self, payload, expected):
        assert normalize_orders_payload(payload) == expected

    @pytest.mark.parametrize(
        "payload",
        [
            {"data": {"order": {"id": "A-1"}}},
            {"order": {"id": "A-1"}},
            {"data": {"id": "A-1"}},
            {"id": "A-1"},
        ],
    )
    def test_normalize_order_payload(self, payload):
        assert normalize_order_payload(payload) == {"id": "A-1"}

    def test_map_orders_skips_invalid(self, mapper):
        payload = {"orders": [order_payload("A-1"), {"id": ""}, None, order_payload("B-2")]}

        assert [o.full_id for o in mapper.map_orders(payload)] == ["A-1", "B-2"]
