"""Incremental Server-Sent Events framer.

Turns the raw byte chunks of a ``text/event-stream`` response into
``SSEFrame(event_type, data)`` pairs.

Wire Format (consumed):
    event: order_updated
    data: {"order": {"id": "A-1", ...}, "message": "Status changed"}
    <blank line>

Rules:
    - Frames are delimited by a blank line (``\\n\\n``)
    - A partial frame stays buffered until its delimiter (or stream end)
    - Multi-byte UTF-8 sequences split across chunks are reassembled
    - ``event:`` sets the event type, ``data:`` sets the payload (both
      trimmed), every other line (``id:``, ``retry:``, comments) is ignored
    - ``connected`` and ``heartbeat`` frames only signal liveness and are
      consumed without output
    - A payload that is not valid JSON is logged and dropped; framing
      continues

Reference:
    - https://html.spec.whatwg.org/multipage/server-sent-events.html
"""

import codecs
import json
from collections.abc import AsyncGenerator, AsyncIterable
from dataclasses import dataclass
from typing import Any

import structlog

from orderstream.core.constants import (
    SSE_DATA_FIELD,
    SSE_EVENT_FIELD,
    SSE_FRAME_DELIMITER,
    SSE_LIVENESS_EVENTS,
)
from orderstream.domain.protocols import LoggerProtocol


@dataclass(frozen=True, slots=True, kw_only=True)
class SSEFrame:
    """One parsed SSE frame.

    Attributes:
        event_type: Value of the ``event:`` line (empty if absent).
        data: Decoded JSON payload of the ``data:`` line.
    """

    event_type: str
    data: Any


class StreamFramer:
    """Stateful framer for one SSE stream.

    A framer instance belongs to exactly one connection; it keeps the
    undelimited tail of the stream between ``feed()`` calls.

    Example:
        >>> framer = StreamFramer()
        >>> framer.feed(b'event: new_order\\ndata: {"order": {"id": "A"}}')
        []
        >>> framer.feed(b"\\n\\n")
        [SSEFrame(event_type='new_order', data={'order': {'id': 'A'}})]
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        """Initialize framer.

        Args:
            logger: Optional logger (module structlog logger if not provided).
        """
        self._logger = logger or structlog.get_logger(__name__)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[SSEFrame]:
        """Consume one transport chunk.

        Args:
            chunk: Raw bytes as delivered by the transport.

        Returns:
            Frames completed by this chunk, in stream order.
        """
        self._buffer += self._decoder.decode(chunk)
        self._buffer = self._buffer.replace("\r\n", "\n")

        segments = self._buffer.split(SSE_FRAME_DELIMITER)
        # Last segment has no delimiter yet
        self._buffer = segments.pop()
        return self._parse_segments(segments)

    def flush(self) -> list[SSEFrame]:
        """Parse whatever is buffered once the stream has ended.

        Returns:
            Frames recovered from the undelimited tail (usually none).
        """
        self._buffer += self._decoder.decode(b"", final=True)
        tail, self._buffer = self._buffer, ""
        return self._parse_segments([tail.replace("\r\n", "\n")])

    async def iter_frames(
        self, chunks: AsyncIterable[bytes]
    ) -> AsyncGenerator[SSEFrame, None]:
        """Lazily frame an async byte stream.

        Args:
            chunks: Async iterable of raw byte chunks.

        Yields:
            SSEFrame: Frames in stream order; the tail is flushed at the end.
        """
        async for chunk in chunks:
            for frame in self.feed(chunk):
                yield frame
        for frame in self.flush():
            yield frame

    def _parse_segments(self, segments: list[str]) -> list[SSEFrame]:
        frames: list[SSEFrame] = []
        for segment in segments:
            if not segment.strip():
                continue
            frame = self.parse_frame(segment)
            if frame is not None:
                frames.append(frame)
        return frames

    def parse_frame(self, raw: str) -> SSEFrame | None:
        """Parse the text of a single frame.

        Args:
            raw: Frame text without the trailing blank line.

        Returns:
            SSEFrame, or None for liveness frames, frames without payload
            and frames whose payload is not valid JSON.
        """
        event_type = ""
        payload = ""

        for line in raw.split("\n"):
            if line.startswith(SSE_EVENT_FIELD):
                event_type = line[len(SSE_EVENT_FIELD) :].strip()
            elif line.startswith(SSE_DATA_FIELD):
                payload = line[len(SSE_DATA_FIELD) :].strip()

        if event_type in SSE_LIVENESS_EVENTS:
            self._logger.debug("sse_liveness_frame", event_type=event_type)
            return None

        if not payload:
            return None

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            self._logger.warning(
                "sse_frame_invalid_json",
                event_type=event_type,
                error=str(e),
            )
            return None

        return SSEFrame(event_type=event_type, data=data)
