"""Grouping of encoded raster lines into size-limited blocks."""

from __future__ import annotations

from typing import BinaryIO


class Block:
    """A batch of encoded lines, written out as one raster command."""

    MAX_SIZE = 16350

    def __init__(self) -> None:
        self._lines: list[bytes] = []
        self._line_bytes = 0

    def empty(self) -> bool:
        """True when the block holds no lines."""
        return self._line_bytes == 0

    def line_fits(self, size: int) -> bool:
        """True when a line of ``size`` bytes can still be added."""
        return self._line_bytes + size < self.MAX_SIZE

    def add_line(self, line: bytes) -> None:
        """Append an encoded line; it must be non-empty and must fit."""
        if not line:
            raise ValueError("cannot add an empty line")
        if not self.line_fits(len(line)):
            raise ValueError("line does not fit in block")
        self._line_bytes += len(line)
        self._lines.append(bytes(line))

    def flush(self, out: BinaryIO) -> None:
        """Write the block with its header to ``out`` and empty it."""
        if self.empty():
            return
        header = f"{self._line_bytes + 2}w".encode("ascii")
        out.write(header + bytes([0, len(self._lines) & 0xFF]))
        for line in self._lines:
            out.write(line)
        self._lines.clear()
        self._line_bytes = 0