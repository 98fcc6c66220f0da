# brlaser

Encodes monochrome raster pages into the print data that many Brother laser
printers understand: PJL job and page headers around PCL raster blocks of
delta-compressed lines. It also has a decoder that turns such print data
back into PBM images.

## Modules

- `brlaser.line.encode_line(line, reference=None)` encodes one raster line.
  With a `reference` (the previous line, of the same length, else
  `ValueError`) it writes only the differences, as substitute and repeat
  edit commands, at most 254 of them per line. Without a reference the
  whole line goes into one substitute command. A line of all zero bytes is
  always the single byte `0xFF`.
- `brlaser.block.Block` collects encoded lines. `line_fits(size)` tells
  whether a line of that many bytes still fits under the limit of 16350
  bytes, `add_line(line)` adds one (raising `ValueError` for an empty line
  or one that does not fit), `empty()` reports whether it holds anything,
  and `flush(out)` writes the `<n>w` header and the lines to a binary
  stream and empties the block. Flushing an empty block writes nothing.
- `brlaser.job.PageParams` holds the page settings: `num_copies`,
  `resolution`, `duplex`, `economode`, `sourcetray`, `mediatype`,
  `papersize`.
- `brlaser.job.Job(out, job_name)` writes a print job to a binary stream.
  Characters outside printable ASCII, `"` and `\` in the job name become
  spaces. `encode_page(params, lines, linesize, rows)` writes the job
  header before the first page, a page header whenever the params differ
  from the previous page's, then up to `lines` rows of `linesize` bytes
  taken from `rows`; it stops early when `rows` runs out or gives a row of
  another length. Every 64th line starts afresh without a reference.
  `pages()` counts the pages, and `close()` (also called on leaving a
  `with` block) writes the end-of-job trailer, but only if a page was
  encoded: a job without pages writes nothing at all.
- `brlaser.filter` connects page headers to jobs:
  - `PageHeader` is a dataclass of raster page header fields.
  - `build_page_params(header)` maps a header to `PageParams`: the media
    position picks the tray (`AUTO`, `T1`, `T2`, `T3`, `MP`, `MANUAL`,
    else `AUTO`), the page size name picks the paper (`A4`, `A5`, `A6`,
    `B5`, `B6`, `C5`, `MONARCH`, `DL`, `EXECUTIVE`, `LEGAL`, `LETTER`,
    else `A4`), and `cups_integer[10]` switches toner saving.
  - `ascii_job_name(job_id, job_user, job_name)` joins the non-empty,
    printable-ASCII parts with `/`, falls back to `brlaser`, and cuts the
    result to 79 characters.
  - `check_header(header, page_number)` raises `BogusRasterError` unless
    the page is 1 bit per pixel, 1 bit per colour, one colour, and at most
    10000 bytes per line.
  - `dump_page_header(header, stream=None)` writes each header field as a
    `DEBUG:` line (to standard error by default).
  - `run_job(out, job_name, pages, log=None)` encodes an iterable of
    `(header, rows)` pairs as one job, writes `DEBUG:`, `PAGE:` and
    `ERROR:` lines to `log`, and returns the number of pages. A bogus
    header is logged and its `BogusRasterError` re-raised once the job has
    been closed.
- `brlaser.brdecode` reads print data back: `read_pages(stream)` yields
  each page as a list of decoded lines and stops at the first page without
  lines; `write_pbm(page, out)` writes a page as a binary PBM image,
  padding short lines with zeros. Broken data raises `DecodeError`, as
  `UnexpectedEOF` or, for a line longer than 2000 bytes, `LineOverflow`.

## Writing a job

```python
from brlaser.job import Job, PageParams

params = PageParams(
    num_copies=1,
    resolution=600,
    duplex=False,
    economode=False,
    sourcetray="AUTO",
    mediatype="PLAINPAPER",
    papersize="A4",
)

rows = [bytes(80) for _ in range(100)]

with open("out.prn", "wb") as out, Job(out, "example") as job:
    job.encode_page(params, len(rows), 80, rows)
```

## Decoding print data

```
brdecode out.prn pages
```

This writes `pages-1.pbm`, `pages-2.pbm` and so on, one image per page,
and prints each file name to standard error. With only the input file
name, that name is also the prefix; with no argument the data is read from
standard input (which must not be a terminal) and the files are named
`page-1.pbm`, `page-2.pbm`, … The exit status is 1 when a file cannot be
opened or written, or the data cannot be decoded.

## What it does not do

The package does not read CUPS raster files and has no print filter
command. To print, the caller supplies the page headers and rows, to
`run_job` or to `Job.encode_page`, and sends the bytes written to the
printer itself.

## Tests

```
pip install -e .[test]
pytest
```