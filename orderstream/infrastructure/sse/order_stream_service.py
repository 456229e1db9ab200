"""Order stream service.

Owns the SSE connection for the partner order stream: connects when the
first listener subscribes, broadcasts every order event to all listeners,
reconnects with exponential backoff, and disconnects when the last
listener leaves.

Lifecycle:
    subscribe (0 → 1 listeners) → connect
    handshake failure / stream end → ReconnectPolicy
        should_retry  → connect again after next_delay
        exhausted     → retries_exhausted = True, stay DISCONNECTED
    unsubscribe (1 → 0 listeners) → disconnect

Architecture:
    - One instance per session, built by the container (no module singleton)
    - Single-threaded asyncio: reconnects are ``loop.call_later`` handles,
      connects and stream consumption run as tasks
    - A session counter invalidates in-flight work after ``disconnect()``
    - Listener and watcher failures are logged and isolated

Usage:
    service = create_order_stream_service(token_store)
    unsubscribe = service.subscribe(projection.apply)
    ...
    unsubscribe()
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Coroutine
from typing import Any

import structlog

from orderstream.core.enums import ErrorCode
from orderstream.core.result import Failure, Success
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import StreamError
from orderstream.domain.events import OrderEvent
from orderstream.domain.protocols import LoggerProtocol, TokenStoreProtocol
from orderstream.domain.value_objects import ReconnectPolicy
from orderstream.infrastructure.sse.sse_connection import SSEConnection

EventListener = Callable[[OrderEvent], None]
StateWatcher = Callable[[ConnectionState], None]
ConnectionFactory = Callable[[], SSEConnection]


class OrderStreamService:
    """Fan-out SSE client with automatic reconnection.

    Attributes:
        connection_state: Current ConnectionState.
        reconnect_attempts: Consecutive failed attempts since the last success.
        retries_exhausted: True once the policy has given up.
    """

    def __init__(
        self,
        *,
        token_store: TokenStoreProtocol,
        url: str,
        policy: ReconnectPolicy | None = None,
        connection_factory: ConnectionFactory | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize service.

        Args:
            token_store: Source of the bearer token (read before every connect).
            url: SSE endpoint URL.
            policy: Reconnect policy (defaults if not provided).
            connection_factory: Builds one SSEConnection per connect attempt.
            logger: Optional logger (module structlog logger if not provided).
        """
        self._token_store = token_store
        self._url = url
        self._policy = policy or ReconnectPolicy()
        self._connection_factory = connection_factory or SSEConnection
        self._logger = logger or structlog.get_logger(__name__)

        self._listeners: list[EventListener] = []
        self._watchers: list[StateWatcher] = []
        self._state = ConnectionState.DISCONNECTED
        self._connection: SSEConnection | None = None
        self._connect_task: asyncio.Task[None] | None = None
        self._stream_task: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._reconnect_attempts = 0
        self._retries_exhausted = False
        self._session = 0

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def connection_state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Whether the stream is open."""
        return self._state is ConnectionState.CONNECTED

    @property
    def reconnect_attempts(self) -> int:
        """Consecutive failed attempts since the last successful connect."""
        return self._reconnect_attempts

    @property
    def retries_exhausted(self) -> bool:
        """Whether the reconnect policy has given up."""
        return self._retries_exhausted

    @property
    def listener_count(self) -> int:
        """Number of subscribed event listeners."""
        return len(self._listeners)

    # =========================================================================
    # Subscription
    # =========================================================================

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register an event listener.

        The first listener triggers a connect in the background.

        Args:
            listener: Called synchronously with every OrderEvent.

        Returns:
            Idempotent unsubscribe function; removing the last listener
            disconnects the stream.
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
            if len(self._listeners) == 1:
                self._reconnect_attempts = 0
                self._retries_exhausted = False
                self._connect_task = self._spawn(self.connect())

        def unsubscribe() -> None:
            if listener not in self._listeners:
                return
            self._listeners.remove(listener)
            if not self._listeners:
                self._logger.debug("sse_last_listener_removed", url=self._url)
                connection = self._halt()
                if connection is not None:
                    self._spawn(connection.close())

        return unsubscribe

    def watch_state(self, watcher: StateWatcher) -> Callable[[], None]:
        """Register a connection state watcher.

        Watchers are notified on every state change and once more when
        retries are exhausted.

        Args:
            watcher: Called synchronously with the current ConnectionState.

        Returns:
            Idempotent unwatch function.
        """
        self._watchers.append(watcher)

        def unwatch() -> None:
            if watcher in self._watchers:
                self._watchers.remove(watcher)

        return unwatch

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def connect(self) -> None:
        """Open the stream unless a connect is in flight or already open.

        Failures are not raised; they feed the reconnect policy.
        """
        if self._state.is_active:
            return

        session = self._session
        self._set_state(ConnectionState.CONNECTING)

        try:
            token = await self._token_store.get_token()
        except Exception as e:
            if session != self._session:
                return
            self._logger.warning(
                "sse_token_read_failed",
                url=self._url,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._handle_connection_error(
                StreamError(
                    code=ErrorCode.SSE_TOKEN_MISSING,
                    message=f"Token store failed: {type(e).__name__}",
                    url=self._url,
                )
            )
            return
        if session != self._session:
            return
        if not token:
            self._logger.warning("sse_token_missing", url=self._url)
            self._handle_connection_error(
                StreamError(
                    code=ErrorCode.SSE_TOKEN_MISSING,
                    message="No bearer token available",
                    url=self._url,
                )
            )
            return

        connection = self._connection_factory()
        self._connection = connection
        result = await connection.open(self._url, token)

        if session != self._session:
            if isinstance(result, Success):
                await connection.close()
            return

        match result:
            case Success(value=events):
                self._reconnect_attempts = 0
                self._retries_exhausted = False
                self._set_state(ConnectionState.CONNECTED)
                self._stream_task = asyncio.create_task(self._consume(events, session))
                self._logger.info("sse_connected", url=self._url)
            case Failure(error=error):
                self._connection = None
                self._handle_connection_error(error)

    async def disconnect(self) -> None:
        """Close the stream and cancel pending work. Idempotent."""
        connection = self._halt()
        if connection is not None:
            await connection.close()
            self._logger.info("sse_disconnected", url=self._url)

    def _halt(self) -> SSEConnection | None:
        """Synchronous part of disconnect.

        Invalidates the session, cancels the reconnect timer and the
        connect and stream tasks (never the calling task).

        Returns:
            The connection to close, if any.
        """
        self._session += 1

        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

        current = asyncio.current_task()
        for task in (self._connect_task, self._stream_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
        self._connect_task = None
        self._stream_task = None

        connection, self._connection = self._connection, None
        self._set_state(ConnectionState.DISCONNECTED)
        return connection

    async def _consume(self, events: AsyncIterator[OrderEvent], session: int) -> None:
        async for event in events:
            self._notify_listeners(event)

        if session != self._session:
            return
        # Server closed the stream or a read failed
        self._logger.info("sse_stream_ended", url=self._url)
        self._stream_task = None
        self._connection = None
        self._handle_connection_error(None)

    def _handle_connection_error(self, error: StreamError | None) -> None:
        """Apply the reconnect policy after a failed connect or a lost stream.

        Args:
            error: Handshake error, or None when an open stream ended.
        """
        self._set_state(ConnectionState.DISCONNECTED)

        if not self._listeners:
            self._logger.debug("sse_reconnect_skipped_no_listeners", url=self._url)
            return

        self._reconnect_attempts += 1
        attempt = self._reconnect_attempts

        if self._policy.should_retry(attempt):
            delay_ms = self._policy.next_delay(attempt)
            self._logger.info(
                "sse_reconnect_scheduled",
                attempt=attempt,
                max_attempts=self._policy.max_attempts,
                delay_ms=delay_ms,
                error=str(error) if error else None,
            )
            loop = asyncio.get_running_loop()
            self._reconnect_handle = loop.call_later(delay_ms / 1000, self._reconnect)
            return

        self._retries_exhausted = True
        self._logger.error(
            "sse_reconnect_exhausted",
            max_attempts=self._policy.max_attempts,
            error=str(error) if error else None,
        )
        self._notify_watchers()

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        if not self._listeners:
            return
        self._connect_task = self._spawn(self.connect())

    # =========================================================================
    # Notification
    # =========================================================================

    def _notify_listeners(self, event: OrderEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                self._logger.error(
                    "sse_listener_failed",
                    event_kind=event.kind.value,
                    order_id=event.order_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        self._notify_watchers()

    def _notify_watchers(self) -> None:
        for watcher in list(self._watchers):
            try:
                watcher(self._state)
            except Exception as e:
                self._logger.error(
                    "sse_state_watcher_failed",
                    state=self._state.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
