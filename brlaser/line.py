"""Delta-compressed encoding of raster lines for Brother laser printers."""

from __future__ import annotations

from collections.abc import Sequence

_MAX_EDITS = 254
_BLANK_LINE = b"\xff"


def _overflow(value: int) -> bytes:
    """Encode the part of a field that did not fit into the command byte."""
    if value < 0:
        return b""
    if value < 255:
        return bytes([value])
    return b"\xff" * (value // 255) + bytes([value % 255])


def _substitute(offset: int, data: bytes) -> bytes:
    """A command replacing ``len(data)`` bytes after skipping ``offset``."""
    assert 0 <= offset < 10000
    assert data
    offset_max, count_max = 15, 7
    count = len(data) - 1
    command = (min(offset, offset_max) << 3) | min(count, count_max)
    return (
        bytes([command])
        + _overflow(offset - offset_max)
        + _overflow(count - count_max)
        + data
    )


def _repeat(offset: int, count: int, value: int) -> bytes:
    """A command writing ``value`` ``count`` times after skipping ``offset``."""
    assert 0 <= offset < 10000
    assert 2 <= count < 10000
    offset_max, count_max = 3, 31
    count -= 2
    command = 128 | (min(offset, offset_max) << 5) | min(count, count_max)
    return (
        bytes([command])
        + _overflow(offset - offset_max)
        + _overflow(count - count_max)
        + bytes([value])
    )


def _repeat_length(line: bytes, start: int, end: int) -> int:
    """Number of bytes equal to ``line[start]`` from ``start`` onwards."""
    if start == end:
        return 0
    value = line[start]
    pos = start + 1
    while pos < end and line[pos] == value:
        pos += 1
    return pos - start


def _substitute_length(line: bytes, reference: bytes, start: int, end: int) -> int:
    """Length of the run best encoded as a substitute command."""
    if start != end:
        prev = cur = start
        for nxt in range(start + 1, end):
            if line[cur] == reference[cur] and line[nxt] == reference[nxt]:
                return cur - start
            if line[cur] == line[nxt] and line[cur] == line[prev]:
                return prev - start
            prev, cur = cur, nxt
    return end - start


def encode_line(
    line: Sequence[int], reference: Sequence[int] | None = None
) -> bytes:
    """Encode a raster line, as a delta against ``reference`` if given.

    Without a reference the whole line is sent as one substitute command.
    A line of all zeros is always encoded as a single 0xFF byte.
    """
    line = bytes(line)
    if reference is not None:
        reference = bytes(reference)
        if len(line) != len(reference):
            raise ValueError("line and reference must have the same length")

    if not any(line):
        return _BLANK_LINE

    if reference is None:
        return b"\x01" + _substitute(0, line)

    end = len(line)
    while end > 0 and line[end - 1] == reference[end - 1]:
        end -= 1

    commands = bytearray()
    num_edits = 0
    pos = 0
    while True:
        skip_start = pos
        while pos < end and line[pos] == reference[pos]:
            pos += 1
        offset = pos - skip_start
        if pos == end:
            break

        num_edits += 1
        if num_edits == _MAX_EDITS:
            # Out of edits: send the remainder in one big substitute command.
            commands += _substitute(offset, line[pos:end])
            break

        length = _substitute_length(line, reference, pos, end)
        if length > 0:
            commands += _substitute(offset, line[pos:pos + length])
            pos += length
        else:
            length = _repeat_length(line, pos, end)
            assert length >= 2
            commands += _repeat(offset, length, line[pos])
            pos += length

    return bytes([num_edits]) + bytes(commands)