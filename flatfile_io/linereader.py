"""
Buffered line reading for flatfile-io.

``LineReader`` wraps a binary stream and hands out one *logical* line at
a time. The stream is read in chunks of at most ``buffer_size`` bytes, so
a long line may arrive in several fragments; the reader glues those
fragments back together in a growable buffer before returning.

Each call to ``read_line()`` returns ``(line, eof)``:

- ``line`` is the line content without its terminator (``\\n`` or
  ``\\r\\n``).
- ``eof`` is ``True`` when the end of the stream was reached while
  producing this line. A trailing line without a terminator is still
  returned as data (with ``eof=True``); a stream that ends with a
  terminator produces one last ``(b"", True)``.

Read errors other than end-of-stream propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO

from flatfile_io.exceptions import InvalidArgumentError

DEFAULT_BUFFER_SIZE = 4096


class LineReader:
    """Assemble complete lines from a chunked binary stream."""

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise InvalidArgumentError(
                "LineReader", f"Buffer size must be positive, got {buffer_size}"
            )
        self._stream = stream
        self._buffer_size = buffer_size
        self._buffer = bytearray()
        self.eof = False

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def read_line(self) -> tuple[bytes, bool]:
        """Read the next full line from the stream.

        Returns:
            Tuple of (line bytes without terminator, end-of-stream flag).

        Raises:
            OSError: If the underlying stream fails.
        """
        buffer = self._buffer
        del buffer[:]

        while True:
            chunk = self._stream.readline(self._buffer_size)
            if not chunk:
                self.eof = True
                return bytes(buffer), True
            if chunk.endswith(b"\n"):
                buffer += chunk[:-1]
                # "\r\n" may have been split across two chunks
                if buffer.endswith(b"\r"):
                    del buffer[-1:]
                return bytes(buffer), False
            buffer += chunk

    def __iter__(self) -> Iterator[bytes]:
        eof = self.eof
        while not eof:
            line, eof = self.read_line()
            yield line
