"""SSE-backed order source.

Loads the full order list once, then keeps it current from the order
stream. Events that arrive while the stream is down are not replayed, so
every successful reconnect (but not the first connect, which follows the
initial fetch) triggers one full refetch.

Usage:
    source = RealTimeOrderSource(api_client=client, stream_service=service)
    await source.start()
    source.orders          # most recent first
    await source.stop()
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from orderstream.application.projections import OrderListProjection
from orderstream.core.result import Failure, Result, Success
from orderstream.domain.entities import Order
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import OrderApiError
from orderstream.domain.events import OrderEvent
from orderstream.domain.protocols import (
    LoggerProtocol,
    OrderApiProtocol,
    StatusListener,
)
from orderstream.infrastructure.sse import OrderStreamService


class RealTimeOrderSource:
    """Order source fed by the SSE order stream.

    Implements OrderSourceProtocol (structural typing).
    """

    def __init__(
        self,
        *,
        api_client: OrderApiProtocol,
        stream_service: OrderStreamService,
        projection: OrderListProjection | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize real-time source.

        Args:
            api_client: Orders REST client (initial load and refetches).
            stream_service: Order stream to subscribe to.
            projection: Order list to keep current (new one if not provided).
            logger: Optional logger (module structlog logger if not provided).
        """
        self._api_client = api_client
        self._stream = stream_service
        self._projection = projection or OrderListProjection()
        self._logger = logger or structlog.get_logger(__name__)

        self._loading = True
        self._started = False
        self._has_connected = False
        self._unsubscribe: Callable[[], None] | None = None
        self._unwatch: Callable[[], None] | None = None
        self._refetch_task: asyncio.Task[None] | None = None
        self._status_listeners: list[StatusListener] = []

    @property
    def orders(self) -> tuple[Order, ...]:
        """Current snapshot."""
        return self._projection.orders

    @property
    def loading(self) -> bool:
        """Whether a full fetch is in flight (True before the first one)."""
        return self._loading

    @property
    def last_update(self) -> datetime | None:
        """When the snapshot last changed."""
        return self._projection.last_update

    @property
    def connection_status(self) -> ConnectionState:
        """State of the underlying order stream."""
        return self._stream.connection_state

    @property
    def is_connected(self) -> bool:
        """Whether the order stream is open."""
        return self._stream.is_connected

    @property
    def retries_exhausted(self) -> bool:
        """Whether the order stream gave up reconnecting."""
        return self._stream.retries_exhausted

    async def start(self) -> None:
        """Load the order list, then subscribe to the order stream."""
        if self._started:
            return
        self._started = True
        self._has_connected = False

        await self.refresh_orders()
        if not self._started:
            # Stopped while the initial fetch was in flight
            return

        self._unwatch = self._stream.watch_state(self._on_state_change)
        self._unsubscribe = self._stream.subscribe(self._on_event)
        self._logger.info("realtime_source_started")

    async def stop(self) -> None:
        """Unsubscribe from the order stream. Idempotent."""
        if not self._started:
            return
        self._started = False

        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._refetch_task is not None:
            self._refetch_task.cancel()
            self._refetch_task = None
        self._logger.info("realtime_source_stopped")

    async def refresh_orders(self) -> Result[tuple[Order, ...], OrderApiError]:
        """Fetch the full list and replace the snapshot on success."""
        self._loading = True
        try:
            result = await self._api_client.list_orders()
        finally:
            self._loading = False

        match result:
            case Success(value=orders):
                self._projection.replace_all(orders)
                self._logger.debug("realtime_orders_fetched", count=len(orders))
                return Success(value=self._projection.orders)
            case Failure(error=error):
                self._logger.warning(
                    "realtime_fetch_failed",
                    error_code=error.code.value,
                    status_code=error.status_code,
                )
                return Failure(error=error)

    def update_order_optimistically(self, order_id: str, **changes: Any) -> bool:
        """Patch one order locally until the next server event overwrites it."""
        return self._projection.update_order_optimistically(order_id, **changes)

    def watch_status(self, listener: StatusListener) -> Callable[[], None]:
        """Register a connection status listener.

        Listeners also fire when the stream gives up reconnecting (with
        the unchanged DISCONNECTED state).

        Returns:
            Idempotent unwatch function.
        """
        self._status_listeners.append(listener)

        def unwatch() -> None:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

        return unwatch

    def _on_event(self, event: OrderEvent) -> None:
        if self._projection.apply(event):
            self._logger.debug(
                "realtime_order_event_applied",
                event_kind=event.kind.value,
                order_id=event.order_id,
            )

    def _on_state_change(self, state: ConnectionState) -> None:
        if state is ConnectionState.CONNECTED:
            if self._has_connected:
                self._schedule_refetch()
            self._has_connected = True

        for listener in list(self._status_listeners):
            try:
                listener(state)
            except Exception as e:
                self._logger.error(
                    "realtime_status_listener_failed",
                    state=state.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def _schedule_refetch(self) -> None:
        if self._refetch_task is not None and not self._refetch_task.done():
            return
        self._logger.info("realtime_refetch_after_reconnect")
        self._refetch_task = asyncio.get_running_loop().create_task(self._refetch())

    async def _refetch(self) -> None:
        await self.refresh_orders()
