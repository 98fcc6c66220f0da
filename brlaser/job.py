"""Print job output: PJL framing and PCL raster pages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import BinaryIO

from .block import Block
from .line import encode_line

_UEL = "\x1b%-12345X"
_LINES_PER_BAND = 64


@dataclass
class PageParams:
    """Page settings that are sent to the printer in the page header."""

    num_copies: int = 0
    resolution: int = 0
    duplex: bool = False
    economode: bool = False
    sourcetray: str = ""
    mediatype: str = ""
    papersize: str = ""


def _clean_job_name(job_name: str | bytes) -> str:
    raw = job_name.encode("utf-8") if isinstance(job_name, str) else bytes(job_name)
    return "".join(
        " " if b < 32 or b >= 127 or b in (ord('"'), ord("\\")) else chr(b)
        for b in raw
    )


class Job:
    """Writes a sequence of raster pages as one printer job.

    The job trailer is written by :meth:`close`, or on leaving a ``with``
    block, and only if at least one page was encoded.
    """

    def __init__(self, out: BinaryIO, job_name: str | bytes) -> None:
        self._out = out
        self._job_name = _clean_job_name(job_name)
        self._page_params = PageParams()
        self._pages = 0
        self._closed = False

    def __enter__(self) -> Job:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def pages(self) -> int:
        """Number of pages encoded so far."""
        return self._pages

    def close(self) -> None:
        """Finish the job; writes the trailer if any page was encoded."""
        if self._closed:
            return
        self._closed = True
        if self._pages != 0:
            self._end_job()

    def _write(self, text: str) -> None:
        self._out.write(text.encode("ascii"))

    def _begin_job(self) -> None:
        self._out.write(bytes(128))
        self._write(f"{_UEL}@PJL\n")
        self._write(f'@PJL JOB NAME="{self._job_name}"\n')

    def _end_job(self) -> None:
        self._write(f"{_UEL}@PJL\n")
        self._write(f'@PJL EOJ NAME="{self._job_name}"\n')
        self._write(f"{_UEL}\n")

    def _write_page_header(self) -> None:
        p = self._page_params
        self._write(f"{_UEL}@PJL\n")
        if p.resolution != 1200:
            self._write("@PJL SET RAS1200MODE = FALSE\n")
            self._write(f"@PJL SET RESOLUTION = {p.resolution}\n")
        else:
            self._write("@PJL SET RAS1200MODE = TRUE\n")
            self._write("@PJL SET RESOLUTION = 600\n")
        self._write(f"@PJL SET ECONOMODE = {'ON' if p.economode else 'OFF'}\n")
        self._write(f"@PJL SET SOURCETRAY = {p.sourcetray}\n")
        self._write(f"@PJL SET MEDIATYPE = {p.mediatype}\n")
        self._write(f"@PJL SET PAPER = {p.papersize}\n")
        self._write("@PJL SET PAGEPROTECT = AUTO\n")
        self._write("@PJL SET ORIENTATION = PORTRAIT\n")
        self._write("@PJL ENTER LANGUAGE = PCL\n")
        self._write("\x1bE")
        self._write(f"\x1b&l{max(1, p.num_copies)}X")
        if p.duplex:
            self._write("\x1b&l2S")

    def encode_page(
        self,
        params: PageParams,
        lines: int,
        linesize: int,
        rows: Iterable[Sequence[int]],
    ) -> None:
        """Encode one page of at most ``lines`` rows of ``linesize`` bytes.

        Reading stops early when ``rows`` runs out or yields a row of the
        wrong length.
        """
        if self._pages == 0:
            self._begin_job()
        self._pages += 1

        if params != self._page_params:
            self._page_params = PageParams(**vars(params))
            self._write_page_header()

        row_iter = iter(rows)

        def next_row() -> bytes | None:
            row = next(row_iter, None)
            if row is None or len(row) != linesize:
                return None
            return bytes(row)

        reference = next_row()
        if reference is None:
            return

        block = Block()
        block.add_line(encode_line(reference))
        self._write("\x1b*b1030m")

        for i in range(1, lines):
            line = next_row()
            if line is None:
                break
            if i % _LINES_PER_BAND == 0:
                block.flush(self._out)
                encoded = encode_line(line)
            else:
                encoded = encode_line(line, reference)
                if not block.line_fits(len(encoded)):
                    block.flush(self._out)
                    encoded = encode_line(line)
            block.add_line(encoded)
            reference = line

        block.flush(self._out)
        self._write("1030M\f")
        self._out.flush()