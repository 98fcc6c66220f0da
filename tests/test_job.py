import io

import pytest

from brlaser.job import Job, PageParams

UEL = b"\x1b%-12345X"


def job_start(name=b"name"):
    return bytes(128) + UEL + b"@PJL\n" + b'@PJL JOB NAME="' + name + b'"\n'


def job_end(name=b"name"):
    return UEL + b"@PJL\n" + b'@PJL EOJ NAME="' + name + b'"\n' + UEL + b"\n"


def page_header(resolution_lines=b"@PJL SET RAS1200MODE = FALSE\n@PJL SET RESOLUTION = 600\n",
                economode=b"OFF", copies=b"1", duplex=b""):
    return (
        UEL + b"@PJL\n"
        + resolution_lines
        + b"@PJL SET ECONOMODE = " + economode + b"\n"
        + b"@PJL SET SOURCETRAY = AUTO\n"
        + b"@PJL SET MEDIATYPE = PLAIN\n"
        + b"@PJL SET PAPER = A4\n"
        + b"@PJL SET PAGEPROTECT = AUTO\n"
        + b"@PJL SET ORIENTATION = PORTRAIT\n"
        + b"@PJL ENTER LANGUAGE = PCL\n"
        + b"\x1bE\x1b&l" + copies + b"X"
        + duplex
    )


@pytest.fixture
def params():
    return PageParams(
        num_copies=1,
        resolution=600,
        duplex=False,
        economode=False,
        sourcetray="AUTO",
        mediatype="PLAIN",
        papersize="A4",
    )


def test_empty_job_produces_no_output():
    out = io.BytesIO()
    with Job(out, "name"):
        pass
    assert out.getvalue() == b""


def test_single_page_output(params):
    out = io.BytesIO()
    with Job(out, "name") as job:
        job.encode_page(params, 2, 2, [b"\x01\x02", b"\x01\x02"])
        assert job.pages() == 1
    expected = (
        job_start()
        + page_header()
        + b"\x1b*b1030m"
        + b"7w" + bytes([0, 2, 1, 1, 1, 2, 0])
        + b"1030M\f"
        + job_end()
    )
    assert out.getvalue() == expected


def test_band_boundary_starts_new_block(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 65, 3, [bytes(3)] * 65)
    data = out.getvalue()
    body = b"\x1b*b1030m" + b"66w" + bytes([0, 64]) + b"\xff" * 64 + b"3w" + bytes([0, 1, 0xFF]) + b"1030M\f"
    assert data == job_start() + page_header() + body


def test_lines_limit_stops_reading(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 1, 1, [b"\x00", b"\x01", b"\x02"])
    assert out.getvalue().endswith(b"\x1b*b1030m" + b"3w" + bytes([0, 1, 0xFF]) + b"1030M\f")


def test_no_rows_writes_only_header(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 10, 2, [])
    assert job.pages() == 1
    assert out.getvalue() == job_start() + page_header()


def test_short_row_ends_page(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 10, 2, [b"\x00\x00", b"\x00"])
    assert out.getvalue().endswith(b"3w" + bytes([0, 1, 0xFF]) + b"1030M\f")


def test_header_only_written_when_params_change(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 1, 1, [b"\x00"])
    job.encode_page(params, 1, 1, [b"\x00"])
    assert out.getvalue().count(b"@PJL ENTER LANGUAGE = PCL") == 1
    params.economode = True
    job.encode_page(params, 1, 1, [b"\x00"])
    assert out.getvalue().count(b"@PJL ENTER LANGUAGE = PCL") == 2
    assert job.pages() == 3


def test_default_params_write_no_header():
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(PageParams(), 1, 1, [b"\x00"])
    assert b"@PJL SET" not in out.getvalue()


def test_1200_dpi_economode_copies_duplex(params):
    params.resolution = 1200
    params.economode = True
    params.num_copies = 3
    params.duplex = True
    out = io.BytesIO()
    Job(out, "name").encode_page(params, 1, 1, [])
    expected = job_start() + page_header(
        resolution_lines=b"@PJL SET RAS1200MODE = TRUE\n@PJL SET RESOLUTION = 600\n",
        economode=b"ON",
        copies=b"3",
        duplex=b"\x1b&l2S",
    )
    assert out.getvalue() == expected


def test_zero_copies_sent_as_one(params):
    params.num_copies = 0
    out = io.BytesIO()
    Job(out, "name").encode_page(params, 1, 1, [])
    assert out.getvalue().endswith(b"\x1b&l1X")


def test_job_name_is_sanitized(params):
    out = io.BytesIO()
    with Job(out, 'a"b\\c\td\u00e9') as job:
        job.encode_page(params, 1, 1, [])
    assert out.getvalue().endswith(job_end(b"a b c d  "))


def test_close_is_idempotent(params):
    out = io.BytesIO()
    job = Job(out, "name")
    job.encode_page(params, 1, 1, [])
    job.close()
    job.close()
    assert out.getvalue().count(b"@PJL EOJ") == 1