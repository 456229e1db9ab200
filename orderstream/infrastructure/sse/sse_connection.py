"""SSE connection to the partner order stream.

One SSEConnection wraps one HTTP streaming request. ``open()`` performs the
handshake and returns an async iterator of OrderEvent; the iterator ends
when the server closes the stream, a read fails, or ``close()`` is called.
The end of iteration is the caller's signal to decide on reconnection;
this class never retries on its own.

Architecture:
    - httpx.AsyncClient with ``send(..., stream=True)``
    - Handshake bounded by ``asyncio.timeout``
    - Read timeout of ``2 × heartbeat_interval`` detects stale streams
    - Frames → StreamFramer → OrderMapper → OrderEvent
    - The task iterating the events is the abortable handle for ``close()``

Reference:
    - https://www.python-httpx.org/async/#streaming-responses
"""

import asyncio
from collections.abc import AsyncIterator, Callable

import httpx
import structlog

from orderstream.core.constants import (
    BEARER_PREFIX,
    SSE_ACCEPT_HEADER,
    SSE_CACHE_CONTROL_HEADER,
    SSE_HANDSHAKE_TIMEOUT_SECONDS_DEFAULT,
    SSE_HEARTBEAT_INTERVAL_MS_DEFAULT,
    SSE_STALE_HEARTBEAT_MULTIPLIER,
)
from orderstream.core.enums import ErrorCode
from orderstream.core.result import Failure, Result, Success
from orderstream.domain.enums import ConnectionState
from orderstream.domain.errors import StreamError
from orderstream.domain.events import OrderEvent, OrderEventKind
from orderstream.domain.protocols import LoggerProtocol
from orderstream.infrastructure.mappers import OrderMapper
from orderstream.infrastructure.sse.stream_framer import SSEFrame, StreamFramer

ClientFactory = Callable[[httpx.Timeout], httpx.AsyncClient]


def _default_client_factory(timeout: httpx.Timeout) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)


class SSEConnection:
    """Streaming HTTP connection producing order events.

    Example:
        >>> connection = SSEConnection()
        >>> result = await connection.open(url, token)
        >>> if isinstance(result, Success):
        ...     async for event in result.value:
        ...         projection.apply(event)

    Attributes:
        state: Current ConnectionState.
    """

    def __init__(
        self,
        *,
        heartbeat_interval_ms: int = SSE_HEARTBEAT_INTERVAL_MS_DEFAULT,
        handshake_timeout: float = SSE_HANDSHAKE_TIMEOUT_SECONDS_DEFAULT,
        mapper: OrderMapper | None = None,
        client_factory: ClientFactory | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize connection.

        Args:
            heartbeat_interval_ms: Expected server heartbeat period; a stream
                silent for twice this long is treated as failed.
            handshake_timeout: Seconds allowed from request to response headers.
            mapper: Order mapper (new instance if not provided).
            client_factory: Builds the httpx client for each open (tests
                inject a MockTransport here).
            logger: Optional logger (module structlog logger if not provided).
        """
        self._read_timeout = heartbeat_interval_ms * SSE_STALE_HEARTBEAT_MULTIPLIER / 1000
        self._handshake_timeout = handshake_timeout
        self._mapper = mapper or OrderMapper()
        self._client_factory = client_factory or _default_client_factory
        self._logger = logger or structlog.get_logger(__name__)

        self._state = ConnectionState.DISCONNECTED
        self._client: httpx.AsyncClient | None = None
        self._response: httpx.Response | None = None
        self._reader: asyncio.Task[object] | None = None
        self._closed = False
        self._url = ""

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    async def open(
        self, url: str, bearer_token: str
    ) -> Result[AsyncIterator[OrderEvent], StreamError]:
        """Perform the SSE handshake.

        Args:
            url: Stream endpoint URL.
            bearer_token: Partner bearer token (never logged).

        Returns:
            Success(event iterator) once response headers are received,
            Failure(StreamError) on non-2xx status, transport error,
            handshake timeout, or when the connection is already open.
        """
        if self._state.is_active:
            return Failure(
                error=StreamError(
                    code=ErrorCode.SSE_ALREADY_OPEN,
                    message="Connection is already open",
                    url=url,
                )
            )

        self._url = url
        self._closed = False
        self._state = ConnectionState.CONNECTING
        self._logger.debug("sse_handshake_started", url=url)

        try:
            self._client = self._client_factory(
                httpx.Timeout(self._handshake_timeout, read=self._read_timeout)
            )
            request = self._client.build_request(
                "GET",
                url,
                headers={
                    "Authorization": f"{BEARER_PREFIX}{bearer_token}",
                    "Accept": SSE_ACCEPT_HEADER,
                    "Cache-Control": SSE_CACHE_CONTROL_HEADER,
                },
            )
            async with asyncio.timeout(self._handshake_timeout):
                response = await self._client.send(request, stream=True)
        except (TimeoutError, httpx.TimeoutException):
            return await self._fail(
                ErrorCode.SSE_HANDSHAKE_TIMEOUT,
                f"No response within {self._handshake_timeout}s",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return await self._fail(
                ErrorCode.SSE_TRANSPORT_FAILED,
                f"Transport error: {type(e).__name__}",
                details={"error": str(e)},
            )
        except asyncio.CancelledError:
            await self._release()
            self._state = ConnectionState.DISCONNECTED
            raise

        self._response = response

        if self._closed:
            return await self._fail(
                ErrorCode.SSE_TRANSPORT_FAILED,
                "Connection closed during handshake",
            )

        if not response.is_success:
            return await self._fail(
                ErrorCode.SSE_HANDSHAKE_FAILED,
                f"SSE handshake failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        self._state = ConnectionState.CONNECTED
        self._logger.info("sse_connection_opened", url=url)
        return Success(value=self._read_events(response))

    async def close(self) -> None:
        """Close the connection.

        Idempotent. Sets DISCONNECTED immediately and cancels the task that
        is reading the stream (unless close is called from that task, in
        which case iteration stops after the current event).
        """
        if self._closed:
            return
        self._closed = True
        self._state = ConnectionState.DISCONNECTED

        reader = self._reader
        if reader is None:
            # Stream never iterated (or already finished): release directly
            await self._release()
        elif reader is not asyncio.current_task():
            reader.cancel()

        self._logger.debug("sse_connection_closed", url=self._url)

    async def _read_events(self, response: httpx.Response) -> AsyncIterator[OrderEvent]:
        self._reader = asyncio.current_task()
        frames = StreamFramer(logger=self._logger).iter_frames(response.aiter_bytes())
        try:
            async for frame in frames:
                event = self._to_event(frame)
                if event is not None:
                    yield event
                if self._closed:
                    break
        except (httpx.HTTPError, httpx.StreamError) as e:
            if not self._closed:
                self._logger.warning(
                    "sse_stream_read_failed",
                    url=self._url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        finally:
            self._state = ConnectionState.DISCONNECTED
            self._reader = None
            await frames.aclose()
            await self._release()
            self._logger.debug("sse_stream_ended", url=self._url)

    def _to_event(self, frame: SSEFrame) -> OrderEvent | None:
        """Map one frame to an OrderEvent.

        Returns:
            OrderEvent, or None for unknown event types and invalid events.
        """
        kind = OrderEventKind.from_wire(frame.event_type)
        if kind is None:
            self._logger.debug("sse_unknown_event_type", event_type=frame.event_type)
            return None

        payload = frame.data if isinstance(frame.data, dict) else {}
        raw_order = payload.get("order")
        order = self._mapper.map_order(raw_order) if raw_order is not None else None

        if order is not None:
            order_id = order.full_id
        elif isinstance(raw_order, dict):
            order_id = str(raw_order.get("id") or "")
        else:
            order_id = ""

        message = payload.get("message")
        try:
            return OrderEvent(
                kind=kind,
                order_id=order_id,
                order=order,
                message=str(message) if message is not None else None,
            )
        except ValueError as e:
            self._logger.warning(
                "sse_invalid_order_event",
                event_type=frame.event_type,
                error=str(e),
            )
            return None

    async def _fail(
        self,
        code: ErrorCode,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, str] | None = None,
    ) -> Failure[StreamError]:
        await self._release()
        self._state = ConnectionState.DISCONNECTED
        self._logger.warning(
            "sse_handshake_failed",
            url=self._url,
            error_code=code.value,
            status_code=status_code,
        )
        return Failure(
            error=StreamError(
                code=code,
                message=message,
                url=self._url,
                status_code=status_code,
                details=details,
            )
        )

    async def _release(self) -> None:
        response, self._response = self._response, None
        client, self._client = self._client, None
        if response is not None:
            await response.aclose()
        if client is not None:
            await client.aclose()
