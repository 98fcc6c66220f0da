"""Decode printer raster data back into PBM images, one file per page."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import BinaryIO

MAX_LINE_SIZE = 2000

_ESC = 0x1B
_FORM_FEED = 0x0C


class DecodeError(Exception):
    """Raised when the raster data cannot be decoded."""


class UnexpectedEOF(DecodeError):
    """The input ended in the middle of a raster block."""

    def __init__(self) -> None:
        super().__init__("Unexpected EOF")


class LineOverflow(DecodeError):
    """A decoded line grew beyond any reasonable width."""

    def __init__(self) -> None:
        super().__init__("Unreasonable long line, aborting")


class _PageReader:
    """Decoder state: the current line persists from one row to the next."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._line = bytearray()
        self._offset = 0
        self._page: list[bytes] = []

    def _get(self) -> int:
        data = self._stream.read(1)
        if not data:
            raise UnexpectedEOF()
        return data[0]

    def _read_overflow(self) -> int:
        total = 0
        while True:
            ch = self._get()
            total += ch
            if ch != 255:
                return total

    def _place(self, offset: int, count: int) -> int:
        """Make room for ``count`` bytes after ``offset``; return their start."""
        end = self._offset + offset + count
        if end > len(self._line):
            if end > MAX_LINE_SIZE:
                raise LineOverflow()
            self._line.extend(bytes(end - len(self._line)))
        start = self._offset + offset
        self._offset = start + count
        return start

    def _read_repeat(self, cmd: int) -> None:
        offset = (cmd >> 5) & 3
        if offset == 3:
            offset = (offset + self._read_overflow()) & 0xFFFF
        count = cmd & 31
        if count == 31:
            count = (count + self._read_overflow()) & 0xFFFF
        count = (count + 2) & 0xFFFF
        value = self._get()
        start = self._place(offset, count)
        self._line[start:start + count] = bytes([value]) * count

    def _read_substitute(self, cmd: int) -> None:
        offset = (cmd >> 3) & 15
        if offset == 15:
            offset = (offset + self._read_overflow()) & 0xFFFF
        count = cmd & 7
        if count == 7:
            count = (count + self._read_overflow()) & 0xFFFF
        count = (count + 1) & 0xFFFF
        start = self._place(offset, count)
        data = self._stream.read(count)
        if len(data) < count:
            raise UnexpectedEOF()
        self._line[start:start + count] = data

    def _read_edit(self) -> None:
        cmd = self._get()
        if cmd & 0x80:
            self._read_repeat(cmd)
        else:
            self._read_substitute(cmd)

    def _read_line(self) -> None:
        num_edits = self._get()
        if num_edits == 255:
            self._line.clear()
        else:
            self._offset = 0
            for _ in range(num_edits):
                self._read_edit()
        self._page.append(bytes(self._line))

    def _read_block(self) -> None:
        count = self._get() * 256
        count += self._get()
        for _ in range(count):
            self._read_line()

    def read_page(self) -> list[bytes]:
        self._page = []
        self._line.clear()
        in_esc = False
        while True:
            data = self._stream.read(1)
            if not data:
                break
            ch = data[0]
            if ch == _FORM_FEED:
                break
            if ch == _ESC:
                in_esc = True
            elif in_esc and ch == ord("w"):
                self._read_block()
            elif in_esc and ord("A") <= ch <= ord("Z"):
                in_esc = False
        return self._page


def read_pages(stream: BinaryIO) -> Iterator[list[bytes]]:
    """Yield each page of ``stream`` as a list of decoded lines.

    Decoding stops at the first page that holds no lines.
    """
    reader = _PageReader(stream)
    while True:
        page = reader.read_page()
        if not page:
            return
        yield page


def write_pbm(page: list[bytes], out: BinaryIO) -> None:
    """Write ``page`` as a binary PBM image, padding short lines with zeros."""
    width = max((len(line) for line in page), default=0)
    out.write(f"P4 {width * 8} {len(page)}\n".encode("ascii"))
    for line in page:
        out.write(bytes(line) + bytes(width - len(line)))


def _convert(stream: BinaryIO, out_prefix: str) -> int:
    try:
        for page_num, page in enumerate(read_pages(stream), start=1):
            out_filename = f"{out_prefix}-{page_num}.pbm"
            try:
                out_file = open(out_filename, "wb")
            except OSError:
                print(f'Can\'t write file "{out_filename}"', file=sys.stderr)
                return 1
            with out_file:
                write_pbm(page, out_file)
            print(out_filename, file=sys.stderr)
    except DecodeError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Convert a print file into ``<prefix>-<n>.pbm`` images."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) >= 2:
        in_filename, out_prefix = args[0], args[1]
    elif len(args) == 1:
        in_filename = out_prefix = args[0]
    else:
        in_filename, out_prefix = None, "page"

    if in_filename is None:
        if sys.stdin.isatty():
            print("No filename given and no input on stdin", file=sys.stderr)
            return 1
        return _convert(sys.stdin.buffer, out_prefix)

    try:
        in_file = open(in_filename, "rb")
    except OSError:
        print(f'Can\'t open file "{in_filename}"', file=sys.stderr)
        return 1
    with in_file:
        return _convert(in_file, out_prefix)


if __name__ == "__main__":
    sys.exit(main())