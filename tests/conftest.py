"""Pytest configuration and shared test helpers.

This configuration ensures:
1. Async tests run under pytest-asyncio (auto mode, function-scoped loops)
2. Every coroutine test is marked asyncio even without the decorator
3. Order fixtures are built the same way across test modules
"""

import inspect
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from orderstream.domain.entities import Order
from orderstream.domain.enums import OrderStatus


# =============================================================================
# Test helpers
# =============================================================================


def make_order(full_id: str = "A-1", **overrides: Any) -> Order:
    """Helper to create an Order for testing.

    Args:
        full_id: Backend order id.
        **overrides: Any other Order field.

    Returns:
        Order instance (pending, 100.00 total unless overridden).
    """
    defaults: dict[str, Any] = {
        "customer_name": "Asha",
        "status": OrderStatus.PENDING,
        "total_amount": Decimal("100.00"),
    }
    defaults.update(overrides)
    return Order(full_id=full_id, **defaults)


def order_payload(order_id: str = "A-1", **overrides: Any) -> dict[str, Any]:
    """Helper to create a backend order JSON object.

    Usage:
        payload = order_payload("B-2", status="confirmed")
    """
    payload: dict[str, Any] = {
        "id": order_id,
        "customerId": "c-17",
        "customer": {"name": "Asha", "mobile": "9876543210"},
        "address": {"pickup": {"street": "12 MG Road", "landmark": "", "city": "Pune"}},
        "placedAt": "2026-10-18T09:30:00+00:00",
        "items": [{"id": "li-1", "laundryItem": {"name": "Shirt"}, "quantity": 3, "price": "40"}],
        "status": "pending",
        "paymentType": "COD",
        "paymentStatus": "pending",
        "totalAmount": "420.00",
        "gst": "20.00",
        "deliveryFee": "30.00",
        "itemsAmount": "370.00",
        "deliveryPartnerId": "",
        "distance": "2.4",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double satisfying LoggerProtocol."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def token_store() -> MagicMock:
    """Token store double with a valid token and partner id."""
    store = MagicMock()
    store.get_token = AsyncMock(return_value="secret-token")
    store.get_partner_id = AsyncMock(return_value="partner-42")
    return store


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        function = getattr(item, "function", None)
        if function is not None and inspect.iscoroutinefunction(function):
            item.add_marker(pytest.mark.asyncio)
