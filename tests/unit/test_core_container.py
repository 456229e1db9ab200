"""Unit tests for container factories.

Tests cover:
- get_logger() / get_storage() singleton behavior
- create_order_stream_service() wiring from settings
- create_order_source_selector() wiring (shared API client, separate projections)
"""

from unittest.mock import MagicMock, patch

import pytest
import structlog

from orderstream.core.config import Settings
from orderstream.core.container import (
    create_order_source_selector,
    create_order_stream_service,
    create_orders_api_client,
    get_logger,
    get_storage,
)
from orderstream.core.enums import Environment, RealTimeStrategy
from orderstream.infrastructure.sse import SSEConnection


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment=Environment.TESTING,
        api_base_url="https://backend.example.com/api",
        storage_path=tmp_path / "storage.json",
        sse_max_reconnect_attempts=3,
        sse_initial_reconnect_delay_ms=500,
        sse_heartbeat_interval_ms=15000,
    )


@pytest.fixture(autouse=True)
def patched_logger():
    with patch("orderstream.core.container.realtime.get_logger") as mock_get_logger:
        mock_get_logger.return_value = MagicMock()
        yield mock_get_logger


@pytest.mark.unit
class TestAppScopedFactories:
    """Test cached singletons."""

    def test_logger_is_singleton(self, settings):
        get_logger.cache_clear()
        with patch(
            "orderstream.core.container.infrastructure.get_settings", return_value=settings
        ):
            assert get_logger() is get_logger()
        get_logger.cache_clear()
        structlog.reset_defaults()

    def test_storage_uses_configured_path(self, settings):
        get_storage.cache_clear()
        with (
            patch(
                "orderstream.core.container.infrastructure.get_settings",
                return_value=settings,
            ),
            patch("orderstream.core.container.infrastructure.get_logger"),
        ):
            storage = get_storage()

            assert storage.path == settings.storage_path
            assert get_storage() is storage
        get_storage.cache_clear()


@pytest.mark.unit
class TestCreateOrderStreamService:
    """Test create_order_stream_service()."""

    def test_policy_and_url_from_settings(self, settings, token_store):
        service = create_order_stream_service(token_store, settings)

        assert service._url == "https://backend.example.com/api/partner/orders/sse"
        assert service._policy.max_attempts == 3
        assert service._policy.initial_delay_ms == 500

    def test_connection_factory_builds_configured_connections(self, settings, token_store):
        service = create_order_stream_service(token_store, settings)

        connection = service._connection_factory()

        assert isinstance(connection, SSEConnection)
        assert connection._read_timeout == 30.0

    def test_each_call_builds_new_service(self, settings, token_store):
        first = create_order_stream_service(token_store, settings)
        second = create_order_stream_service(token_store, settings)

        assert first is not second


@pytest.mark.unit
class TestCreateOrderSourceSelector:
    """Test create_order_source_selector()."""

    def test_wires_both_sources(self, settings, token_store):
        selector = create_order_source_selector(token_store, settings)

        sse_source = selector._sse_source
        polling_source = selector._polling_source
        assert sse_source._api_client is polling_source._api_client
        assert sse_source._projection is not polling_source._projection
        assert selector.strategy is RealTimeStrategy.SSE
        assert polling_source.interval_ms == 30000

    def test_api_client_uses_settings(self, settings, token_store):
        client = create_orders_api_client(token_store, settings)

        assert client._base_url == "https://backend.example.com/api"
        assert client._orders_path == "/partner/orders"
