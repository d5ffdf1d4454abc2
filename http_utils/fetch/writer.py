"""Downstream writer interface and a stream-backed implementation."""

import asyncio
from typing import BinaryIO, Protocol, TextIO, runtime_checkable

import structlog

from http_utils.constants import COMPONENT_FETCH


logger = structlog.get_logger()


@runtime_checkable
class Writer(Protocol):
    """Output channel that receives fetched bodies.

    ``push`` may be called from several requests at once. ``close`` may be
    called more than once and must be a no-op after the first call.
    """

    async def push(self, data: str | bytes) -> None:
        """Hand one chunk downstream."""
        ...

    async def close(self) -> None:
        """Signal that no more data follows."""
        ...


class WriterClosedError(Exception):
    """Raised when pushing to a writer that has already been closed."""


class StreamWriter:
    """Writer that appends chunks to a text or binary stream.

    Bytes pushed to a text stream are decoded as UTF-8; text pushed to a
    binary stream is encoded as UTF-8. Pushes are serialized with a lock so
    chunks from concurrent requests never interleave within one write.
    """

    def __init__(
        self,
        stream: TextIO | BinaryIO,
        binary: bool = False,
        close_stream: bool = False,
    ) -> None:
        """Initialize the writer.

        Args:
            stream: Destination stream.
            binary: Whether the stream expects bytes.
            close_stream: Whether closing the writer also closes the stream.
        """
        self._stream = stream
        self._binary = binary
        self._close_stream = close_stream
        self._lock = asyncio.Lock()
        self._closed = False
        self._log = logger.bind(component=COMPONENT_FETCH, subcomponent="writer")

    @property
    def closed(self) -> bool:
        """Whether the writer has been closed."""
        return self._closed

    async def push(self, data: str | bytes) -> None:
        """Write one chunk and flush it.

        Raises:
            WriterClosedError: If the writer was already closed.
        """
        async with self._lock:
            if self._closed:
                msg = "Cannot push to a closed writer"
                raise WriterClosedError(msg)
            self._stream.write(self._coerce(data))  # type: ignore[arg-type]
            self._stream.flush()

    async def close(self) -> None:
        """Close the writer; later calls do nothing."""
        async with self._lock:
            if self._closed:
                return
            self._closed = True
            self._stream.flush()
            if self._close_stream:
                self._stream.close()
        self._log.debug("writer_closed")

    def _coerce(self, data: str | bytes) -> str | bytes:
        if self._binary:
            return data.encode("utf-8") if isinstance(data, str) else data
        return data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
