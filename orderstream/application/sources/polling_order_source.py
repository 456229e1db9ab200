"""Polling order source.

Fetches the full order list once on start and then every interval until
stopped. Each successful fetch replaces the snapshot wholesale. A failed
fetch is transient: it is logged and recorded in ``error``, the previous
snapshot is kept, and the next tick tries again.

Polling has no connection to lose, so ``connection_status`` is always
CONNECTED.

Usage:
    source = PollingOrderSource(api_client=client, interval_ms=10000)
    await source.start()
    ...
    await source.stop()
"""

import asyncio
import contextlib
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from orderstream.application.projections import OrderListProjection
from orderstream.core.constants import POLLING_INTERVAL_MS_DEFAULT
from orderstream.core.result import Failure, Result, Success
from orderstream.domain.entities import Order
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import OrderApiError
from orderstream.domain.protocols import (
    LoggerProtocol,
    OrderApiProtocol,
    StatusListener,
)


class PollingOrderSource:
    """Order source backed by periodic REST fetches.

    Implements OrderSourceProtocol (structural typing).
    """

    def __init__(
        self,
        *,
        api_client: OrderApiProtocol,
        interval_ms: int = POLLING_INTERVAL_MS_DEFAULT,
        projection: OrderListProjection | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize polling source.

        Args:
            api_client: Orders REST client.
            interval_ms: Delay between fetches.
            projection: Order list to keep current (new one if not provided).
            logger: Optional logger (module structlog logger if not provided).
        """
        self._api_client = api_client
        self._interval_ms = interval_ms
        self._projection = projection or OrderListProjection()
        self._logger = logger or structlog.get_logger(__name__)

        self._task: asyncio.Task[None] | None = None
        self._loading = True
        self._error: str | None = None

    @property
    def orders(self) -> tuple[Order, ...]:
        """Current snapshot."""
        return self._projection.orders

    @property
    def loading(self) -> bool:
        """True until the first fetch completes."""
        return self._loading

    @property
    def error(self) -> str | None:
        """Message of the last failed fetch (cleared by the next success)."""
        return self._error

    @property
    def last_update(self) -> datetime | None:
        """When the snapshot last changed."""
        return self._projection.last_update

    @property
    def interval_ms(self) -> int:
        """Current polling interval."""
        return self._interval_ms

    @property
    def is_polling(self) -> bool:
        """Whether the polling timer is running."""
        return self._task is not None and not self._task.done()

    @property
    def connection_status(self) -> ConnectionState:
        """Always CONNECTED."""
        return ConnectionState.CONNECTED

    @property
    def is_connected(self) -> bool:
        """Always True."""
        return True

    async def start(self, interval_ms: int | None = None) -> None:
        """Fetch now, then keep fetching every interval.

        Calling start again replaces the running timer.

        Args:
            interval_ms: Optional new interval.
        """
        await self.stop()
        if interval_ms is not None:
            self._interval_ms = interval_ms

        self._logger.info("polling_started", interval_ms=self._interval_ms)
        await self.refresh_orders()

        # A concurrent start may have installed a timer during the fetch
        stale = self._task
        if stale is not None and not stale.done():
            stale.cancel()
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop the timer. Idempotent."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.info("polling_stopped")

    async def refresh_orders(self) -> Result[tuple[Order, ...], OrderApiError]:
        """Fetch the full list once, independent of the timer."""
        result = await self._api_client.list_orders()
        self._loading = False

        match result:
            case Success(value=orders):
                self._projection.replace_all(orders)
                self._error = None
                self._logger.debug("polling_orders_fetched", count=len(orders))
                return Success(value=self._projection.orders)
            case Failure(error=error):
                self._error = error.message
                self._logger.warning(
                    "polling_fetch_failed",
                    error_code=error.code.value,
                    status_code=error.status_code,
                    is_transient=error.is_transient,
                )
                return Failure(error=error)

    def update_order_optimistically(self, order_id: str, **changes: Any) -> bool:
        """Patch one order locally until the next fetch overwrites it."""
        return self._projection.update_order_optimistically(order_id, **changes)

    def watch_status(self, listener: StatusListener) -> Callable[[], None]:
        """Status never changes while polling; the listener is never called."""
        return lambda: None

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_ms / 1000)
            try:
                await self.refresh_orders()
            except Exception as e:
                self._logger.error(
                    "polling_tick_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
