"""Size-limited reader for request bodies."""

import io
import logging
from typing import BinaryIO, Final, Protocol, final, override

from server.apps.uploads.exceptions import FileSizeExceededError

# One byte past the limit proves the stream is too long
_TRIP_WIRE_BYTES: Final = 1

logger = logging.getLogger(__name__)


class _Readable(Protocol):
    """Anything with a file-like ``read`` (streams, Django requests)."""

    def read(self, size: int = -1, /) -> bytes: ...  # noqa: WPS428


@final
class SizeLimitedStream(io.RawIOBase):
    """Readable wrapper that refuses to yield more than ``max_size`` bytes.

    The allowance starts at ``max_size + 1``. Reading the extra byte
    means the wrapped stream is longer than allowed, so the read
    raises FileSizeExceededError instead of returning data. A stream
    of exactly ``max_size`` bytes ends normally with ``b''``.

    The wrapped stream is never modified or replaced, only read.
    """

    def __init__(self, stream: BinaryIO | _Readable, max_size: int) -> None:
        """Initialize the limiter.

        Args:
            stream: Readable source, e.g. a Django HttpRequest.
            max_size: Maximum number of bytes the source may contain.

        Raises:
            ValueError: If max_size is negative.
        """
        super().__init__()
        if max_size < 0:
            raise ValueError(f'max_size must be >= 0, got {max_size}')
        self._stream = stream
        self._max_size = max_size
        self._remaining = max_size + _TRIP_WIRE_BYTES

    @property
    def max_size(self) -> int:
        """Get the byte limit."""
        return self._max_size

    @property
    def bytes_read(self) -> int:
        """Get the number of bytes pulled from the wrapped stream."""
        return self._max_size + _TRIP_WIRE_BYTES - self._remaining

    @override
    def readable(self) -> bool:
        return True

    @override
    def read(self, size: int | None = -1) -> bytes:
        """Read up to size bytes, bounded by the remaining allowance.

        Args:
            size: Maximum bytes to return, negative or None reads
                until the allowance or the stream runs out.

        Returns:
            Bytes read. Empty bytes at the end of the stream.

        Raises:
            FileSizeExceededError: If the stream exceeds max_size.
        """
        if self.closed:
            raise ValueError('I/O operation on closed stream')
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining

        chunk = self._stream.read(size) if size else b''
        self._remaining -= len(chunk)

        if self._remaining < _TRIP_WIRE_BYTES:
            logger.warning(
                'Request body exceeds limit of %d bytes',
                self._max_size,
            )
            raise FileSizeExceededError(max_size=self._max_size)
        return chunk

    @override
    def readall(self) -> bytes:
        return self.read()

    @override
    def readinto(self, buffer: bytearray | memoryview) -> int:
        chunk = self.read(len(buffer))
        read_count = len(chunk)
        buffer[:read_count] = chunk
        return read_count
