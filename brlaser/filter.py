"""Turning raster pages with their headers into a printer job."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import BinaryIO, TextIO

from .job import Job, PageParams

PACKAGE = "brlaser"
_MAX_JOB_NAME = 79
_MAX_BYTES_PER_LINE = 10000

_SOURCES = ("AUTO", "T1", "T2", "T3", "MP", "MANUAL")
_SIZES = {
    "A4": "A4",
    "A5": "A5",
    "A6": "A6",
    "B5": "B5",
    "B6": "B6",
    "EnvC5": "C5",
    "EnvMonarch": "MONARCH",
    "EnvPRC5": "DL",
    "EnvDL": "DL",
    "Executive": "EXECUTIVE",
    "Legal": "LEGAL",
    "Letter": "LETTER",
}


class BogusRasterError(ValueError):
    """A page header describes raster data the printer cannot take."""


@dataclass
class PageHeader:
    """The fields of a raster page header."""

    media_class: str = ""
    media_color: str = ""
    media_type: str = ""
    output_type: str = ""
    advance_distance: int = 0
    advance_media: int = 0
    collate: bool = False
    cut_media: int = 0
    duplex: bool = False
    hw_resolution: tuple[int, int] = (0, 0)
    imaging_bounding_box: tuple[int, int, int, int] = (0, 0, 0, 0)
    insert_sheet: bool = False
    jog: int = 0
    leading_edge: int = 0
    margins: tuple[int, int] = (0, 0)
    manual_feed: bool = False
    media_position: int = 0
    media_weight: int = 0
    mirror_print: bool = False
    negative_print: bool = False
    num_copies: int = 0
    orientation: int = 0
    output_face_up: bool = False
    page_size: tuple[int, int] = (0, 0)
    separations: bool = False
    tray_switch: bool = False
    tumble: bool = False
    width: int = 0
    height: int = 0
    cups_media_type: int = 0
    bits_per_color: int = 0
    bits_per_pixel: int = 0
    bytes_per_line: int = 0
    color_order: int = 0
    color_space: int = 0
    compression: int = 0
    row_count: int = 0
    row_feed: int = 0
    row_step: int = 0
    num_colors: int = 0
    borderless_scaling_factor: float = 0.0
    cups_page_size: tuple[float, float] = (0.0, 0.0)
    cups_imaging_bbox: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    cups_integer: tuple[int, ...] = (0,) * 16
    cups_real: tuple[float, ...] = (0.0,) * 16
    cups_string: tuple[str, ...] = ("",) * 16
    marker_type: str = ""
    rendering_intent: str = ""
    page_size_name: str = ""


_DUMP_FIELDS = (
    ("MediaClass", "media_class"),
    ("MediaColor", "media_color"),
    ("MediaType", "media_type"),
    ("OutputType", "output_type"),
    ("AdvanceDistance", "advance_distance"),
    ("AdvanceMedia", "advance_media"),
    ("Collate", "collate"),
    ("CutMedia", "cut_media"),
    ("Duplex", "duplex"),
    ("HWResolution", "hw_resolution"),
    ("ImagingBoundingBox", "imaging_bounding_box"),
    ("InsertSheet", "insert_sheet"),
    ("Jog", "jog"),
    ("LeadingEdge", "leading_edge"),
    ("Margins", "margins"),
    ("ManualFeed", "manual_feed"),
    ("MediaPosition", "media_position"),
    ("MediaWeight", "media_weight"),
    ("MirrorPrint", "mirror_print"),
    ("NegativePrint", "negative_print"),
    ("NumCopies", "num_copies"),
    ("Orientation", "orientation"),
    ("OutputFaceUp", "output_face_up"),
    ("PageSize", "page_size"),
    ("Separations", "separations"),
    ("TraySwitch", "tray_switch"),
    ("Tumble", "tumble"),
    ("cupsWidth", "width"),
    ("cupsHeight", "height"),
    ("cupsMediaType", "cups_media_type"),
    ("cupsBitsPerColor", "bits_per_color"),
    ("cupsBitsPerPixel", "bits_per_pixel"),
    ("cupsBytesPerLine", "bytes_per_line"),
    ("cupsColorOrder", "color_order"),
    ("cupsColorSpace", "color_space"),
    ("cupsCompression", "compression"),
    ("cupsRowCount", "row_count"),
    ("cupsRowFeed", "row_feed"),
    ("cupsRowStep", "row_step"),
    ("cupsNumColors", "num_colors"),
    ("cupsBorderlessScalingFactor", "borderless_scaling_factor"),
    ("cupsPageSize", "cups_page_size"),
    ("cupsImagingBBox", "cups_imaging_bbox"),
    ("cupsInteger", "cups_integer"),
    ("cupsReal", "cups_real"),
    ("cupsString", "cups_string"),
    ("cupsMarkerType", "marker_type"),
    ("cupsRenderingIntent", "rendering_intent"),
    ("cupsPageSizeName", "page_size_name"),
)


def _format_scalar(value: object) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        return format(value, "g")
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def dump_page_header(header: PageHeader, stream: TextIO | None = None) -> None:
    """Write every header field as a debug line to ``stream``."""
    stream = sys.stderr if stream is None else stream
    prefix = f"DEBUG: {PACKAGE}: page header: "
    for name, attr in _DUMP_FIELDS:
        value = getattr(header, attr)
        if isinstance(value, (tuple, list)):
            text = "".join(" " + _format_scalar(v) for v in value)
            stream.write(f"{prefix}{name} ={text}\n")
        else:
            stream.write(f"{prefix}{name} = {_format_scalar(value)}\n")


def _plain_ascii(text: str) -> bool:
    return all(32 <= ord(c) <= 126 for c in text)


def ascii_job_name(job_id: str, job_user: str, job_name: str) -> str:
    """Join the printable parts of the job description with slashes."""
    parts = [p for p in (job_id, job_user, job_name) if p and _plain_ascii(p)]
    result = "/".join(parts) or PACKAGE
    return result[:_MAX_JOB_NAME]


def build_page_params(header: PageHeader) -> PageParams:
    """Derive the printer page settings from a page header."""
    position = header.media_position
    sourcetray = _SOURCES[position] if 0 <= position < len(_SOURCES) else _SOURCES[0]
    return PageParams(
        num_copies=header.num_copies,
        resolution=header.hw_resolution[0],
        duplex=bool(header.duplex),
        economode=bool(header.cups_integer[10]),
        sourcetray=sourcetray,
        mediatype=header.media_type,
        papersize=_SIZES.get(header.page_size_name, "A4"),
    )


def check_header(header: PageHeader, page_number: int) -> None:
    """Raise BogusRasterError unless the page is 1-bit monochrome of sane width."""
    if (
        header.bits_per_pixel != 1
        or header.bits_per_color != 1
        or header.num_colors != 1
        or header.bytes_per_line > _MAX_BYTES_PER_LINE
    ):
        raise BogusRasterError(f"Page {page_number}: Bogus raster data.")


def run_job(
    out: BinaryIO,
    job_name: str,
    pages: Iterable[tuple[PageHeader, Iterable[Sequence[int]]]],
    log: TextIO | None = None,
) -> int:
    """Encode ``(header, rows)`` pages as one job and return the page count.

    A bogus page header is logged and re-raised after the job is closed.
    """
    log = sys.stderr if log is None else log
    with Job(out, job_name) as job:
        for header, rows in pages:
            try:
                check_header(header, job.pages() + 1)
            except BogusRasterError as exc:
                log.write(f"ERROR: {PACKAGE}: {exc}\n")
                dump_page_header(header, log)
                raise
            if job.pages() == 0:
                log.write(f"DEBUG: {PACKAGE}: Page header of first page\n")
                dump_page_header(header, log)
            job.encode_page(
                build_page_params(header),
                header.height,
                header.bytes_per_line,
                rows,
            )
            log.write(f"PAGE: {job.pages()} {header.num_copies}\n")

        if job.pages() == 0:
            log.write(f"ERROR: {PACKAGE}: No pages were found.\n")
        return job.pages()