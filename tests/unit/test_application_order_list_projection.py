"""Unit tests for OrderListProjection.

Tests cover:
- NEW_ORDER prepends (and replaces a duplicate id)
- ORDER_UPDATED replaces by id, unknown id is a no-op
- ORDER_CANCELLED removes by id, unknown id is a no-op
- replace_all() and optimistic patches
- Change listeners (notification and isolation)
"""

from unittest.mock import MagicMock

import pytest

from orderstream.application.projections import OrderListProjection
from orderstream.domain.enums import OrderStatus
from orderstream.domain.events import OrderEvent, OrderEventKind
from tests.conftest import make_order


def event(kind: OrderEventKind, order_id: str, **order_fields) -> OrderEvent:
    order = None if kind is OrderEventKind.ORDER_CANCELLED else make_order(order_id, **order_fields)
    return OrderEvent(kind=kind, order_id=order_id, order=order)


@pytest.fixture
def projection(mock_logger) -> OrderListProjection:
    return OrderListProjection(logger=mock_logger)


# =============================================================================
# Event Application Tests
# =============================================================================


@pytest.mark.unit
class TestApplyNewOrder:
    """Test NEW_ORDER handling."""

    def test_new_orders_are_most_recent_first(self, projection):
        projection.apply(event(OrderEventKind.NEW_ORDER, "1"))
        projection.apply(event(OrderEventKind.NEW_ORDER, "2"))

        assert [o.full_id for o in projection.orders] == ["2", "1"]

    def test_duplicate_id_moves_to_front_with_new_snapshot(self, projection):
        projection.replace_all([make_order("1"), make_order("2")])

        changed = projection.apply(
            event(OrderEventKind.NEW_ORDER, "2", status=OrderStatus.CONFIRMED)
        )

        assert changed is True
        assert [o.full_id for o in projection.orders] == ["2", "1"]
        assert projection.get("2").status is OrderStatus.CONFIRMED


@pytest.mark.unit
class TestApplyOrderUpdated:
    """Test ORDER_UPDATED handling."""

    def test_replaces_matching_order_in_place(self, projection):
        projection.replace_all([make_order("1"), make_order("2"), make_order("3")])

        projection.apply(event(OrderEventKind.ORDER_UPDATED, "2", customer_name="Ravi"))

        assert [o.full_id for o in projection.orders] == ["1", "2", "3"]
        assert projection.get("2").customer_name == "Ravi"

    def test_unknown_id_is_silent_noop(self, projection):
        projection.replace_all([make_order("1")])
        before = projection.orders
        last_update = projection.last_update

        changed = projection.apply(event(OrderEventKind.ORDER_UPDATED, "9"))

        assert changed is False
        assert projection.orders is before
        assert projection.last_update == last_update


@pytest.mark.unit
class TestApplyOrderCancelled:
    """Test ORDER_CANCELLED handling."""

    def test_removes_matching_order(self, projection):
        projection.replace_all([make_order("1"), make_order("2")])

        projection.apply(event(OrderEventKind.ORDER_CANCELLED, "1"))

        assert [o.full_id for o in projection.orders] == ["2"]

    def test_unknown_id_is_silent_noop(self, projection):
        projection.replace_all([make_order("1")])
        before = projection.orders

        changed = projection.apply(event(OrderEventKind.ORDER_CANCELLED, "9"))

        assert changed is False
        assert projection.orders is before


# =============================================================================
# Snapshot and Optimistic Update Tests
# =============================================================================


@pytest.mark.unit
class TestSnapshots:
    """Test replace_all() and optimistic updates."""

    def test_replace_all_is_wholesale(self, projection):
        projection.replace_all([make_order("1"), make_order("2")])

        projection.replace_all([make_order("3")])

        assert [o.full_id for o in projection.orders] == ["3"]
        assert projection.last_update is not None

    def test_orders_are_an_immutable_tuple(self, projection):
        projection.replace_all([make_order("1")])

        assert isinstance(projection.orders, tuple)

    def test_optimistic_update_merges_fields(self, projection):
        projection.replace_all([make_order("1", customer_name="Asha")])

        patched = projection.update_order_optimistically("1", status="confirmed")

        order = projection.get("1")
        assert patched is True
        assert order.status is OrderStatus.CONFIRMED
        assert order.customer_name == "Asha"

    def test_server_event_overwrites_optimistic_patch(self, projection):
        projection.replace_all([make_order("1")])
        projection.update_order_optimistically("1", status="confirmed")

        projection.apply(
            event(OrderEventKind.ORDER_UPDATED, "1", status=OrderStatus.REJECTED)
        )

        assert projection.get("1").status is OrderStatus.REJECTED

    def test_optimistic_update_of_unknown_order_returns_false(self, projection):
        assert projection.update_order_optimistically("9", status="confirmed") is False

    def test_optimistic_update_rejects_unknown_fields(self, projection):
        projection.replace_all([make_order("1")])

        with pytest.raises(TypeError, match="Unknown order fields"):
            projection.update_order_optimistically("1", colour="blue")


# =============================================================================
# Change Listener Tests
# =============================================================================


@pytest.mark.unit
class TestChangeListeners:
    """Test subscribe() notifications."""

    def test_listener_receives_new_snapshot(self, projection):
        listener = MagicMock()
        projection.subscribe(listener)

        projection.apply(event(OrderEventKind.NEW_ORDER, "1"))

        listener.assert_called_once_with(projection.orders)

    def test_noop_does_not_notify(self, projection):
        listener = MagicMock()
        projection.subscribe(listener)

        projection.apply(event(OrderEventKind.ORDER_CANCELLED, "missing"))

        listener.assert_not_called()

    def test_failing_listener_is_isolated(self, projection, mock_logger):
        good = MagicMock()
        projection.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        projection.subscribe(good)

        projection.apply(event(OrderEventKind.NEW_ORDER, "1"))

        good.assert_called_once()
        assert mock_logger.error.call_args[0][0] == "projection_listener_failed"

    def test_unsubscribe_stops_notifications(self, projection):
        listener = MagicMock()
        unsubscribe = projection.subscribe(listener)
        unsubscribe()
        unsubscribe()

        projection.apply(event(OrderEventKind.NEW_ORDER, "1"))

        listener.assert_not_called()
