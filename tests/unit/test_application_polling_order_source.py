"""Unit tests for PollingOrderSource.

Tests cover:
- Immediate fetch on start and periodic fetches afterwards
- Restart replaces the timer (also when starts overlap), stop() halts it
- Failed fetches are transient (error recorded, snapshot kept)
- A fetch that raises is logged and the timer keeps running
- Constant CONNECTED status
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from orderstream.application.sources import PollingOrderSource
from orderstream.core.enums import ErrorCode
from orderstream.core.result import Failure, Success
from orderstream.domain.enums import ConnectionState, OrderStatus
from orderstream.domain.errors import OrderApiError
from tests.conftest import make_order

UNAVAILABLE = OrderApiError(
    code=ErrorCode.ORDERS_API_UNAVAILABLE,
    message="Orders API server error: 503",
    status_code=503,
    is_transient=True,
)


@pytest.fixture
def api_client() -> MagicMock:
    client = MagicMock()
    client.list_orders = AsyncMock(return_value=Success(value=[make_order("1")]))
    return client


@pytest.fixture
async def source(api_client, mock_logger):
    source = PollingOrderSource(api_client=api_client, interval_ms=5, logger=mock_logger)
    yield source
    await source.stop()


@pytest.mark.unit
class TestPollingLifecycle:
    """Test start/stop and the timer."""

    async def test_start_fetches_immediately(self, source, api_client):
        assert source.loading is True

        await source.start()

        assert api_client.list_orders.await_count >= 1
        assert [o.full_id for o in source.orders] == ["1"]
        assert source.loading is False
        assert source.is_polling

    async def test_fetches_repeatedly_until_stopped(self, source, api_client):
        await source.start()
        await asyncio.sleep(0.05)
        await source.stop()
        count = api_client.list_orders.await_count

        await asyncio.sleep(0.03)

        assert count >= 3
        assert api_client.list_orders.await_count == count
        assert source.is_polling is False

    async def test_concurrent_starts_leave_one_timer(self, source, api_client):
        async def slow_list_orders(*args, **kwargs):
            await asyncio.sleep(0.005)
            return Success(value=[make_order("1")])

        api_client.list_orders.side_effect = slow_list_orders

        await asyncio.gather(source.start(), source.start())
        await asyncio.sleep(0.01)

        timers = [
            task
            for task in asyncio.all_tasks()
            if not task.done()
            and task.get_coro().__qualname__ == "PollingOrderSource._poll_loop"
        ]
        assert timers == [source._task]

    async def test_restart_replaces_timer_and_interval(self, source):
        await source.start()
        first_task = source._task

        await source.start(interval_ms=1000)

        assert first_task.cancelled()
        assert source.interval_ms == 1000
        assert source.is_polling

    async def test_stop_is_idempotent(self, source):
        await source.start()

        await source.stop()
        await source.stop()

        assert source.is_polling is False

    async def test_each_fetch_replaces_snapshot(self, source, api_client):
        await source.start()
        api_client.list_orders.return_value = Success(value=[make_order("2"), make_order("3")])

        await source.refresh_orders()

        assert [o.full_id for o in source.orders] == ["2", "3"]


@pytest.mark.unit
class TestPollingFailures:
    """Test that failed fetches are transient."""

    async def test_failed_fetch_keeps_snapshot_and_records_error(self, source, api_client):
        await source.refresh_orders()
        api_client.list_orders.return_value = Failure(error=UNAVAILABLE)

        result = await source.refresh_orders()

        assert isinstance(result, Failure)
        assert source.error == "Orders API server error: 503"
        assert [o.full_id for o in source.orders] == ["1"]
        assert source.connection_status is ConnectionState.CONNECTED

    async def test_next_success_clears_error(self, source, api_client):
        api_client.list_orders.return_value = Failure(error=UNAVAILABLE)
        await source.refresh_orders()
        api_client.list_orders.return_value = Success(value=[])

        await source.refresh_orders()

        assert source.error is None

    async def test_raising_fetch_does_not_stop_the_timer(self, source, api_client, mock_logger):
        calls = 0

        async def flaky_list_orders(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise OSError("storage locked")
            return Success(value=[make_order("1")])

        api_client.list_orders.side_effect = flaky_list_orders

        await source.start()
        await asyncio.sleep(0.05)

        assert source.is_polling
        assert calls >= 3
        logged = [c[0][0] for c in mock_logger.error.call_args_list]
        assert logged.count("polling_tick_failed") == 1

    async def test_failures_do_not_stop_the_timer(self, source, api_client):
        api_client.list_orders.return_value = Failure(error=UNAVAILABLE)

        await source.start()
        await asyncio.sleep(0.03)

        assert source.is_polling
        assert api_client.list_orders.await_count >= 2


@pytest.mark.unit
class TestPollingSurface:
    """Test the source-agnostic surface."""

    async def test_always_connected(self, source):
        assert source.connection_status is ConnectionState.CONNECTED
        assert source.is_connected is True

    async def test_watch_status_never_fires(self, source):
        listener = MagicMock()
        unwatch = source.watch_status(listener)

        await source.start()
        unwatch()

        listener.assert_not_called()

    async def test_optimistic_update(self, source):
        await source.refresh_orders()

        assert source.update_order_optimistically("1", status="confirmed") is True
        assert source.orders[0].status is OrderStatus.CONFIRMED
