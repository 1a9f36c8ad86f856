"""Append-only byte store for archived coverage rows.

Rows are copied in once and handed out as ``ByteRange`` offsets; later
passes re-read them by range instead of keeping per-row copies.
"""

from __future__ import annotations

from diffcov.core.errors import ArenaBoundsError
from diffcov.coverage.models import ByteRange

# Capacity grows in fixed steps of ten 1 KiB line buffers.
ARENA_CHUNK_SIZE = 1024 * 10


class ByteArena:
    """Growable byte buffer whose issued ranges stay valid for its lifetime."""

    __slots__ = ("_buffer", "_length", "_chunk_size")

    def __init__(self, chunk_size: int = ARENA_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._length = 0

    @property
    def length(self) -> int:
        """Number of bytes written so far."""
        return self._length

    @property
    def capacity(self) -> int:
        """Bytes currently allocated."""
        return len(self._buffer)

    def append(self, data: bytes) -> ByteRange:
        """Copy ``data`` to the end of the arena and return where it landed."""
        start = self._length
        end = start + len(data)
        if end > len(self._buffer):
            shortfall = end - len(self._buffer)
            chunks = -(-shortfall // self._chunk_size)
            self._buffer.extend(bytes(chunks * self._chunk_size))
        self._buffer[start:end] = data
        self._length = end
        return ByteRange(start, end)

    def read_range(self, span: ByteRange) -> bytes:
        """Return a copy of exactly the bytes in ``span``.

        Raises:
            ArenaBoundsError: If the range is inverted or reaches past
                the written length.
        """
        if not 0 <= span.start <= span.end <= self._length:
            raise ArenaBoundsError.out_of_bounds(span.start, span.end, self._length)
        return bytes(self._buffer[span.start : span.end])

    def __len__(self) -> int:
        return self._length
