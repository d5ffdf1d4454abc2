"""Unit tests for the stream-backed writer."""

import asyncio
import io

import pytest

from http_utils.fetch.writer import StreamWriter, Writer, WriterClosedError
from tests.helpers.transport import RecordingWriter


class TestStreamWriter:
    """Tests for StreamWriter."""

    @pytest.mark.unit
    def test_satisfies_writer_protocol(self) -> None:
        """Test that both writers match the Writer protocol."""
        assert isinstance(StreamWriter(io.StringIO()), Writer)
        assert isinstance(RecordingWriter(), Writer)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_push_text(self) -> None:
        """Test that text chunks are appended in order."""
        stream = io.StringIO()
        writer = StreamWriter(stream)

        await writer.push("hello ")
        await writer.push("world")

        assert stream.getvalue() == "hello world"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bytes_decoded_for_text_stream(self) -> None:
        """Test that bytes are decoded for a text stream."""
        stream = io.StringIO()
        writer = StreamWriter(stream)

        await writer.push("café".encode())

        assert stream.getvalue() == "café"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_binary_stream(self) -> None:
        """Test that a binary writer writes bytes and encodes text."""
        stream = io.BytesIO()
        writer = StreamWriter(stream, binary=True)

        await writer.push(b"\x00\x01")
        await writer.push("A")

        assert stream.getvalue() == b"\x00\x01A"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        """Test that a second close is a no-op."""
        writer = StreamWriter(io.StringIO())

        await writer.close()
        await writer.close()

        assert writer.closed

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_push_after_close_raises(self) -> None:
        """Test that a closed writer rejects data."""
        writer = StreamWriter(io.StringIO())
        await writer.close()

        with pytest.raises(WriterClosedError):
            await writer.push("late")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_close_stream_option(self) -> None:
        """Test that the stream is closed only when asked to."""
        kept = io.StringIO()
        owned = io.StringIO()

        await StreamWriter(kept).close()
        await StreamWriter(owned, close_stream=True).close()

        assert not kept.closed
        assert owned.closed

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrent_pushes_do_not_interleave(self) -> None:
        """Test that concurrent pushes each land whole."""
        stream = io.StringIO()
        writer = StreamWriter(stream)

        await asyncio.gather(*(writer.push(f"[{i}]") for i in range(20)))

        output = stream.getvalue()
        for i in range(20):
            assert f"[{i}]" in output
