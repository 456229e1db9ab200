"""Unit tests for StreamFramer.

Tests cover:
- Frame parsing (event/data fields, trimming, ignored lines)
- Liveness frames (connected, heartbeat) produce nothing
- Chunk boundaries at every byte offset, including inside UTF-8 sequences
- Invalid JSON is logged and skipped without breaking later frames
- flush() and iter_frames() at stream end
"""

from unittest.mock import MagicMock

import pytest

from orderstream.infrastructure.sse.stream_framer import SSEFrame, StreamFramer

NEW_ORDER_FRAME = b'event: new_order\ndata: {"order": {"id": "A-1", "customer": {"name": "Zo\xc3\xab"}}}\n\n'


@pytest.fixture
def framer(mock_logger) -> StreamFramer:
    return StreamFramer(logger=mock_logger)


# =============================================================================
# Frame Parsing Tests
# =============================================================================


@pytest.mark.unit
class TestFrameParsing:
    """Test parsing of complete frames."""

    def test_parses_event_and_json_data(self, framer):
        frames = framer.feed(NEW_ORDER_FRAME)

        assert frames == [
            SSEFrame(
                event_type="new_order",
                data={"order": {"id": "A-1", "customer": {"name": "Zoë"}}},
            )
        ]

    def test_trims_field_values(self, framer):
        frames = framer.feed(b'event:   order_updated  \ndata:   {"a": 1}   \n\n')

        assert frames == [SSEFrame(event_type="order_updated", data={"a": 1})]

    def test_ignores_id_retry_and_comment_lines(self, framer):
        frames = framer.feed(
            b': keep-alive\nid: 7\nretry: 3000\nevent: order_cancelled\ndata: {"x": true}\n\n'
        )

        assert frames == [SSEFrame(event_type="order_cancelled", data={"x": True})]

    def test_multiple_frames_in_one_chunk_keep_order(self, framer):
        chunk = b'event: a\ndata: 1\n\nevent: b\ndata: 2\n\nevent: c\ndata: 3\n\n'

        frames = framer.feed(chunk)

        assert [f.event_type for f in frames] == ["a", "b", "c"]
        assert [f.data for f in frames] == [1, 2, 3]

    def test_crlf_line_endings_are_normalized(self, framer):
        frames = framer.feed(b'event: new_order\r\ndata: {"k": "v"}\r\n\r\n')

        assert frames == [SSEFrame(event_type="new_order", data={"k": "v"})]

    def test_frame_without_data_produces_nothing(self, framer):
        assert framer.feed(b"event: new_order\n\n") == []

    def test_frame_without_event_line_has_empty_event_type(self, framer):
        frames = framer.feed(b'data: {"k": 1}\n\n')

        assert frames == [SSEFrame(event_type="", data={"k": 1})]

    def test_blank_segments_are_skipped(self, framer):
        assert framer.feed(b"\n\n\n\n") == []


# =============================================================================
# Liveness Frame Tests
# =============================================================================


@pytest.mark.unit
class TestLivenessFrames:
    """Test that connected and heartbeat frames are consumed silently."""

    @pytest.mark.parametrize("event_type", ["connected", "heartbeat"])
    def test_liveness_frame_produces_nothing(self, framer, event_type):
        chunk = f'event: {event_type}\ndata: {{"ts": 1}}\n\n'.encode()

        assert framer.feed(chunk) == []

    def test_heartbeats_between_events_are_suppressed(self, framer):
        chunk = (
            b'event: heartbeat\ndata: {}\n\n'
            + NEW_ORDER_FRAME
            + b'event: heartbeat\ndata: {}\n\n'
        )

        frames = framer.feed(chunk)

        assert len(frames) == 1
        assert frames[0].event_type == "new_order"


# =============================================================================
# Chunk Boundary Tests
# =============================================================================


@pytest.mark.unit
class TestChunkBoundaries:
    """Test that framing is independent of how the transport splits bytes."""

    def test_partial_frame_stays_buffered(self, framer):
        assert framer.feed(b'event: new_order\ndata: {"order"') == []
        assert framer.feed(b': {"id": "A-1"}}\n') == []

        frames = framer.feed(b"\n")

        assert frames == [SSEFrame(event_type="new_order", data={"order": {"id": "A-1"}})]

    def test_split_at_every_byte_offset(self, mock_logger):
        """Two-chunk delivery yields the same frames at every split point."""
        stream = b'event: heartbeat\ndata: {}\n\n' + NEW_ORDER_FRAME + b'event: order_updated\ndata: {"n": 2}\n\n'
        expected = StreamFramer(logger=mock_logger).feed(stream)

        for offset in range(len(stream) + 1):
            framer = StreamFramer(logger=mock_logger)
            frames = framer.feed(stream[:offset]) + framer.feed(stream[offset:])

            assert frames == expected, f"split at byte {offset}"

    def test_byte_by_byte_delivery(self, framer):
        frames = []
        for i in range(len(NEW_ORDER_FRAME)):
            frames.extend(framer.feed(NEW_ORDER_FRAME[i : i + 1]))

        assert len(frames) == 1
        assert frames[0].data["order"]["customer"]["name"] == "Zoë"


# =============================================================================
# Error Handling Tests
# =============================================================================


@pytest.mark.unit
class TestInvalidPayloads:
    """Test that malformed frames never break the stream."""

    def test_invalid_json_is_logged_and_skipped(self, framer, mock_logger):
        frames = framer.feed(b"event: new_order\ndata: {not json\n\n")

        assert frames == []
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][0] == "sse_frame_invalid_json"

    def test_frames_after_invalid_json_still_parse(self, framer):
        frames = framer.feed(b"event: a\ndata: {oops\n\nevent: b\ndata: [1]\n\n")

        assert frames == [SSEFrame(event_type="b", data=[1])]


# =============================================================================
# Stream End Tests
# =============================================================================


@pytest.mark.unit
class TestStreamEnd:
    """Test flush() and iter_frames()."""

    def test_flush_parses_undelimited_tail(self, framer):
        assert framer.feed(b'event: order_updated\ndata: {"n": 1}') == []

        assert framer.flush() == [SSEFrame(event_type="order_updated", data={"n": 1})]

    def test_flush_with_empty_buffer_returns_nothing(self, framer):
        framer.feed(NEW_ORDER_FRAME)

        assert framer.flush() == []

    async def test_iter_frames_yields_in_stream_order(self, framer):
        async def chunks():
            yield b"event: a\nda"
            yield b"ta: 1\n\nevent: heartbeat\ndata: {}\n\nevent: b\n"
            yield b"data: 2"

        frames = [frame async for frame in framer.iter_frames(chunks())]

        assert frames == [
            SSEFrame(event_type="a", data=1),
            SSEFrame(event_type="b", data=2),
        ]
