"""Order source selection and failover.

Picks the SSE or polling source for the session and exposes one
source-agnostic surface over whichever is active.

Strategy rule:
    SSE  iff configured strategy is "sse" and the partner is inside the
         SSE rollout (without a known partner id the configured strategy
         is used as-is)
    else polling

Failover (SSE → polling, one way, once per session):
    active strategy is SSE
    and the SSE source is DISCONNECTED and not loading
    and its stream service has exhausted reconnect retries
    and enable_polling_fallback is set

Degradation is visible through ``connection_info.strategy`` and
``connection_info.is_real_time``.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog

from orderstream.application.sources.polling_order_source import PollingOrderSource
from orderstream.application.sources.realtime_order_source import RealTimeOrderSource
from orderstream.core.enums import RealTimeStrategy
from orderstream.core.realtime_config import FeatureFlags, RealTimeConfig
from orderstream.core.result import Result
from orderstream.domain.entities import Order
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import OrderApiError
from orderstream.domain.protocols import (
    LoggerProtocol,
    OrderSourceProtocol,
    TokenStoreProtocol,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConnectionInfo:
    """Snapshot of how orders are currently delivered.

    Attributes:
        strategy: Active strategy.
        is_real_time: True only while SSE is active and connected.
        last_update: When the order list last changed.
        connection_status: Status of the active source.
    """

    strategy: RealTimeStrategy
    is_real_time: bool
    last_update: datetime | None
    connection_status: ConnectionState


class OrderSourceSelector:
    """Chooses between SSE and polling and fails over once.

    Example:
        >>> selector = create_order_source_selector(storage)
        >>> await selector.start()
        >>> selector.connection_info.strategy
        <RealTimeStrategy.SSE: 'sse'>
    """

    def __init__(
        self,
        *,
        sse_source: RealTimeOrderSource,
        polling_source: PollingOrderSource,
        config: RealTimeConfig,
        flags: FeatureFlags,
        token_store: TokenStoreProtocol | None = None,
        partner_id: str | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize selector.

        Args:
            sse_source: SSE-backed source.
            polling_source: Polling-backed source.
            config: Strategy and polling interval.
            flags: Rollout and fallback flags.
            token_store: Read once on start for the partner id, unless
                partner_id is given.
            partner_id: Known partner id (skips the token store lookup).
            logger: Optional logger (module structlog logger if not provided).
        """
        self._sse_source = sse_source
        self._polling_source = polling_source
        self._config = config
        self._flags = flags
        self._token_store = token_store
        self._partner_id = partner_id
        self._logger = logger or structlog.get_logger(__name__)

        self._strategy = config.strategy
        self._failed_over = False
        self._started = False
        self._unwatch: Callable[[], None] | None = None
        self._failover_task: asyncio.Task[bool] | None = None

    # =========================================================================
    # Strategy
    # =========================================================================

    def select_strategy(self, partner_id: str | None) -> RealTimeStrategy:
        """Apply the strategy rule for a partner.

        Args:
            partner_id: Logged-in partner id, None if unknown.

        Returns:
            Strategy to start the session with.
        """
        if partner_id is None:
            return self._config.strategy
        if (
            self._config.strategy is RealTimeStrategy.SSE
            and self._flags.enable_sse_for_partner(partner_id)
        ):
            return RealTimeStrategy.SSE
        return RealTimeStrategy.POLLING

    @property
    def strategy(self) -> RealTimeStrategy:
        """Active strategy."""
        return self._strategy

    @property
    def failed_over(self) -> bool:
        """Whether this session has fallen back from SSE to polling."""
        return self._failed_over

    @property
    def partner_id(self) -> str | None:
        """Partner id used for the rollout decision."""
        return self._partner_id

    @property
    def active_source(self) -> OrderSourceProtocol:
        """Source backing the unified surface."""
        if self._strategy is RealTimeStrategy.SSE:
            return self._sse_source
        return self._polling_source

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Resolve the strategy and start the matching source."""
        if self._started:
            return
        self._started = True

        if self._partner_id is None and self._token_store is not None:
            self._partner_id = await self._token_store.get_partner_id()

        self._strategy = self.select_strategy(self._partner_id)
        self._logger.info(
            "order_source_selected",
            strategy=self._strategy.value,
            partner_id=self._partner_id,
        )

        if self._strategy is RealTimeStrategy.SSE:
            self._unwatch = self._sse_source.watch_status(self._on_sse_status)
            await self._sse_source.start()
        else:
            await self._polling_source.start(self._config.polling_interval)

    async def stop(self) -> None:
        """Stop both sources. Idempotent."""
        self._started = False
        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None
        if self._failover_task is not None:
            self._failover_task.cancel()
            self._failover_task = None
        await self._sse_source.stop()
        await self._polling_source.stop()

    async def check_failover(self) -> bool:
        """Switch to polling if the SSE source has given up.

        Returns:
            True if this call performed the failover.
        """
        if self._strategy is not RealTimeStrategy.SSE or self._failed_over:
            return False

        sse = self._sse_source
        if not (
            self._flags.enable_polling_fallback
            and sse.connection_status is ConnectionState.DISCONNECTED
            and not sse.loading
            and sse.retries_exhausted
        ):
            return False

        self._strategy = RealTimeStrategy.POLLING
        self._failed_over = True
        self._logger.warning(
            "order_source_failover_to_polling",
            polling_interval_ms=self._config.polling_interval,
        )

        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None
        await sse.stop()
        await self._polling_source.start(self._config.polling_interval)
        return True

    def _on_sse_status(self, state: ConnectionState) -> None:
        if state is not ConnectionState.DISCONNECTED:
            return
        if self._failover_task is not None and not self._failover_task.done():
            return
        self._failover_task = asyncio.get_running_loop().create_task(self.check_failover())

    # =========================================================================
    # Unified surface
    # =========================================================================

    @property
    def orders(self) -> tuple[Order, ...]:
        """Orders of the active source."""
        return self.active_source.orders

    @property
    def loading(self) -> bool:
        """Loading flag of the active source."""
        return self.active_source.loading

    @property
    def last_update(self) -> datetime | None:
        """Last change of the active source."""
        return self.active_source.last_update

    @property
    def connection_status(self) -> ConnectionState:
        """Status of the active source."""
        return self.active_source.connection_status

    @property
    def is_connected(self) -> bool:
        """Connected flag of the active source."""
        return self.active_source.is_connected

    @property
    def connection_info(self) -> ConnectionInfo:
        """How orders are delivered right now."""
        source = self.active_source
        return ConnectionInfo(
            strategy=self._strategy,
            is_real_time=self._strategy is RealTimeStrategy.SSE and source.is_connected,
            last_update=source.last_update,
            connection_status=source.connection_status,
        )

    async def refresh_orders(self) -> Result[tuple[Order, ...], OrderApiError]:
        """Fetch the full list through the active source."""
        return await self.active_source.refresh_orders()

    def update_order_optimistically(self, order_id: str, **changes: Any) -> bool:
        """Patch one order locally (no-op when optimistic updates are off).

        Returns:
            True if the order was patched.
        """
        if not self._flags.enable_optimistic_updates:
            return False
        return self.active_source.update_order_optimistically(order_id, **changes)
