"""Random-access byte sources for the RIFF walker.

A RIFF file can be decoded from an in-memory buffer or from a seekable
binary file. :class:`ByteSource` hides the difference and only reads from
a file where a chunk header or payload is actually needed.
"""

import io
from typing import BinaryIO, TypeAlias

BytesLike: TypeAlias = bytes | bytearray | memoryview


class ByteSource:
    """A clamped view over a byte buffer or a seekable binary file.

    Slicing never raises: bounds outside the view are clamped to it, so a
    read past the end simply returns fewer bytes than requested.
    """

    def __init__(
        self,
        source: BytesLike | BinaryIO,
        start: int = 0,
        stop: int | None = None,
    ) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._buffer = memoryview(source).cast("B")
            self._file: BinaryIO | None = None
            total = len(self._buffer)
        else:
            self._buffer = memoryview(b"")
            self._file = source
            total = source.seek(0, io.SEEK_END)

        self._start = min(max(start, 0), total)
        end = total if stop is None else min(max(stop, self._start), total)
        self._stop = end

    @property
    def size(self) -> int:
        """Number of bytes visible through this view."""
        return self._stop - self._start

    def __len__(self) -> int:
        return self.size

    def _bounds(self, start: int, stop: int | None) -> tuple[int, int]:
        size = self.size
        lo = min(max(start, 0), size)
        hi = size if stop is None else min(max(stop, lo), size)
        return self._start + lo, self._start + hi

    def read(self, start: int = 0, stop: int | None = None) -> bytes:
        """Read bytes ``[start, stop)`` relative to this view."""
        lo, hi = self._bounds(start, stop)
        if self._file is not None:
            self._file.seek(lo)
            return self._file.read(hi - lo)
        return self._buffer[lo:hi].tobytes()

    def slice(self, start: int = 0, stop: int | None = None) -> "ByteSource":
        """Return a sub-view ``[start, stop)`` sharing the same backing store."""
        lo, hi = self._bounds(start, stop)
        view = ByteSource.__new__(ByteSource)
        view._buffer = self._buffer
        view._file = self._file
        view._start = lo
        view._stop = hi
        return view


SourceLike: TypeAlias = BytesLike | BinaryIO | ByteSource


def as_source(source: SourceLike) -> ByteSource:
    """Wrap a buffer or binary file in a :class:`ByteSource`."""
    if isinstance(source, ByteSource):
        return source
    return ByteSource(source)
