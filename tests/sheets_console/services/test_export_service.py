from __future__ import annotations

import csv
import io
from datetime import datetime

import pytest

from sheets_console.services.export_service import (
    ExportService,
    TRUNCATION_MARKER,
    _column_chunks,
    archive_name,
    build_document,
    export_filename,
    format_timestamp,
    to_delimited_text,
    to_paginated_document,
    truncate,
)
from sheets_console.services.storage import LocalFileSystemStorage

NOW = datetime(2024, 3, 5, 14, 7, 9)

ROWS = [
    {"name": "Ada", "note": 'said "hi", then left', "age": 36},
    {"name": "Grace", "note": None, "age": 85},
    {"name": "Linus", "age": 54},
]
COLUMNS = ["name", "note", "age"]


def test_timestamp_and_filename():
    assert format_timestamp(NOW) == "2024-03-05_14-07-09"
    assert export_filename("Staff", "csv", NOW) == "Staff_2024-03-05_14-07-09.csv"
    assert export_filename("Staff.csv", "pdf", NOW) == "Staff_2024-03-05_14-07-09.pdf"


def test_delimited_text_format():
    text = to_delimited_text(ROWS[:2], COLUMNS)
    lines = text.split("\n")

    assert lines[0] == "name,note,age"
    assert lines[1] == '"Ada","said ""hi"", then left","36"'
    assert lines[2] == '"Grace","","85"'


def test_delimited_text_parses_back_to_original_values():
    text = to_delimited_text(ROWS, COLUMNS)
    parsed = list(csv.reader(io.StringIO(text)))

    assert parsed[0] == COLUMNS
    for row, line in zip(ROWS, parsed[1:]):
        expected = ["" if row.get(c) is None else str(row.get(c)) for c in COLUMNS]
        assert line == expected


def test_delimited_text_without_rows_is_header_only():
    assert to_delimited_text([], COLUMNS) == "name,note,age"


def test_truncate():
    assert truncate("x" * 100) == "x" * 100
    assert truncate("x" * 101) == "x" * 100 + TRUNCATION_MARKER
    assert truncate(None) == ""
    assert truncate(12345, max_chars=3) == "123" + TRUNCATION_MARKER


def test_column_chunks_repeat_first_column():
    chunks = _column_chunks([30, 100, 100, 100], page_width=250)
    assert chunks == [[0, 1, 2], [0, 3]]
    assert all(chunk[0] == 0 for chunk in chunks)
    assert _column_chunks([], 100) == []
    assert _column_chunks([500], 100) == [[0]]


def test_paginated_document_is_pdf():
    data = to_paginated_document(ROWS, COLUMNS, "Staff", NOW)
    assert data.startswith(b"%PDF")


def test_paginated_document_handles_wide_and_empty_tables():
    wide_cols = [f"column_{i}" for i in range(30)]
    wide_rows = [{c: "value " * 20 for c in wide_cols}]

    # every column hits the 70mm cap, so each page holds the key column plus two others
    wide = build_document(wide_rows, wide_cols, "Wide", NOW)
    assert wide.pages_count == 15
    assert to_paginated_document(wide_rows, wide_cols, "Wide", NOW).startswith(b"%PDF")

    empty = build_document([], [], "Empty", NOW)
    assert empty.pages_count == 1
    assert to_paginated_document([], [], "Empty", NOW).startswith(b"%PDF")


def test_paginated_document_contains_truncated_values():
    rows = [{"name": "Ada", "bio": "abcdefghijklmnop"}]
    pdf = build_document(rows, ["name", "bio"], "Staff", NOW, max_chars=5)
    pdf.set_compression(False)
    data = bytes(pdf.output())

    assert b"abcde..." in data
    assert b"abcdefghijklmnop" not in data
    assert pdf.pages_count == 1


def test_paginated_document_tolerates_non_latin_text():
    rows = [{"name": "Zoë ✓ 漢字"}]
    assert to_paginated_document(rows, ["name"], "Unicode", NOW).startswith(b"%PDF")


def test_export_service_returns_filename_and_bytes():
    service = ExportService()
    filename, data = service.export("csv", ROWS, COLUMNS, "Staff", NOW)

    assert filename == "Staff_2024-03-05_14-07-09.csv"
    assert data.decode("utf-8").startswith("name,note,age\n")


def test_export_service_rejects_unknown_kind():
    with pytest.raises(ValueError):
        ExportService().export("xlsx", ROWS, COLUMNS, "Staff", NOW)


def test_export_service_archives_exports(tmp_path):
    archive = LocalFileSystemStorage(tmp_path)
    filename, data = ExportService(archive=archive).export("pdf", ROWS, COLUMNS, "Staff", NOW)

    assert archive.read_bytes(f"exports/{filename}") == data


def test_archive_name_flattens_separators():
    assert archive_name("../../Q1 sales_x.csv") == ".._.._Q1 sales_x.csv"
    assert archive_name("a\\b.pdf") == "a_b.pdf"


def test_export_with_path_like_dataset_name_still_downloads(tmp_path):
    archive = LocalFileSystemStorage(tmp_path / "archive")
    filename, data = ExportService(archive=archive).export("csv", ROWS, COLUMNS, "../../Q1 sales", NOW)

    assert filename == "../../Q1 sales_2024-03-05_14-07-09.csv"
    assert data.decode("utf-8").startswith("name,note,age\n")
    assert archive.read_bytes("exports/.._.._Q1 sales_2024-03-05_14-07-09.csv") == data
    assert not (tmp_path / "Q1 sales_2024-03-05_14-07-09.csv").exists()


def test_rejected_archive_write_does_not_block_export():
    class RejectingStorage(LocalFileSystemStorage):
        def write_bytes(self, path, data):
            raise ValueError(f"Access denied: {path}")

    filename, data = ExportService(archive=RejectingStorage(".")).export("csv", ROWS, COLUMNS, "Staff", NOW)
    assert filename == "Staff_2024-03-05_14-07-09.csv"
    assert data
