"""Order source protocol.

Common surface of the SSE-backed and polling-backed order sources, so the
source selector (and anything above it) is source-agnostic.

Usage:
    source: OrderSourceProtocol = RealTimeOrderSource(...)
    await source.start()
    for order in source.orders:
        ...
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

from orderstream.core.result import Result
from orderstream.domain.entities import Order
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import OrderApiError

StatusListener = Callable[[ConnectionState], None]


class OrderSourceProtocol(Protocol):
    """A live view of the partner's orders."""

    @property
    def orders(self) -> tuple[Order, ...]:
        """Current immutable snapshot, most recent first."""
        ...

    @property
    def loading(self) -> bool:
        """Whether a full fetch is in flight (or has never completed)."""
        ...

    @property
    def last_update(self) -> datetime | None:
        """When the snapshot last changed."""
        ...

    @property
    def connection_status(self) -> ConnectionState:
        """Transport status of this source."""
        ...

    @property
    def is_connected(self) -> bool:
        """Shortcut for ``connection_status is CONNECTED``."""
        ...

    async def start(self) -> None:
        """Begin delivering updates."""
        ...

    async def stop(self) -> None:
        """Stop delivering updates and release transport resources."""
        ...

    async def refresh_orders(self) -> Result[tuple[Order, ...], OrderApiError]:
        """Fetch the full list now, replacing the snapshot on success."""
        ...

    def update_order_optimistically(self, order_id: str, **changes: Any) -> bool:
        """Patch one order locally; returns False if the order is unknown."""
        ...

    def watch_status(self, listener: StatusListener) -> Callable[[], None]:
        """Register a connection status listener; returns an unwatch function."""
        ...
