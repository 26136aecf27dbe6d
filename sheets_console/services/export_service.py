from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.fonts import FontFace

from sheets_console.services.storage import StorageBackend

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
MAX_CELL_CHARS = 100
TRUNCATION_MARKER = "..."

CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
PDF_MEDIA_TYPE = "application/pdf"

# Table geometry (mm) and colours for the PDF export
FONT_SIZE = 8
TITLE_FONT_SIZE = 10
LINE_HEIGHT = 4.5
MIN_COL_WIDTH = 18.0
MAX_COL_WIDTH = 70.0
CELL_PADDING = 4.0
HEADER_FILL = (41, 128, 185)
STRIPE_FILL = (245, 245, 245)


def format_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def export_filename(dataset_name: str, ext: str, now: Optional[datetime] = None) -> str:
    base = dataset_name[:-4] if dataset_name.lower().endswith(".csv") else dataset_name
    return f"{base}_{format_timestamp(now)}.{ext}"


def archive_name(filename: str) -> str:
    """Flatten path separators so dataset names cannot leave the archive folder."""
    return filename.replace("/", "_").replace("\\", "_")


def truncate(value: Any, max_chars: int = MAX_CELL_CHARS) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) > max_chars:
        return text[:max_chars] + TRUNCATION_MARKER
    return text


# ---------------------------------------------------------------------------
# Delimited text
# ---------------------------------------------------------------------------
def to_delimited_text(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> str:
    """
    Header line of column names, then one fully quoted line per row.
    Missing values are written as empty strings.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if row.get(col) is None else row.get(col) for col in columns])

    body = buf.getvalue().rstrip("\n")
    header = ",".join(columns)
    return f"{header}\n{body}" if body else header


# ---------------------------------------------------------------------------
# Paginated document
# ---------------------------------------------------------------------------
def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def _column_widths(pdf: FPDF, table: List[List[str]], columns: Sequence[str]) -> List[float]:
    widths = []
    for i, col in enumerate(columns):
        longest = max([pdf.get_string_width(col)] + [pdf.get_string_width(r[i]) for r in table])
        widths.append(min(max(longest + CELL_PADDING, MIN_COL_WIDTH), MAX_COL_WIDTH))
    return widths


def _column_chunks(widths: Sequence[float], page_width: float) -> List[List[int]]:
    """
    Split column indexes into groups that fit the page. Column 0 is the
    row key and is repeated at the start of every group.
    """
    if not widths:
        return []
    if len(widths) == 1:
        return [[0]]

    chunks: List[List[int]] = []
    current = [0]
    used = widths[0]
    for i in range(1, len(widths)):
        if used + widths[i] > page_width and len(current) > 1:
            chunks.append(current)
            current = [0]
            used = widths[0]
        current.append(i)
        used += widths[i]
    chunks.append(current)
    return chunks


def build_document(
        rows: Sequence[Mapping[str, Any]],
        columns: Sequence[str],
        dataset_name: str,
        now: Optional[datetime] = None,
        max_chars: int = MAX_CELL_CHARS,
) -> FPDF:
    """
    Landscape PDF: title line, then a striped table with one row per record.

    Long values are truncated to `max_chars`. Columns that overflow the page
    width continue on following pages, each repeating the first column.
    """
    timestamp = format_timestamp(now)
    name = dataset_name[:-4] if dataset_name.lower().endswith(".csv") else dataset_name
    title = _latin1(f"{name} - Export on {timestamp.replace('_', ' ')}")

    headers = [_latin1(str(c)) for c in columns]
    table = [[_latin1(truncate(row.get(col), max_chars)) for col in columns] for row in rows]

    pdf = FPDF(orientation="L", unit="mm", format="A4")
    pdf.set_auto_page_break(auto=True, margin=12)
    pdf.set_font("Helvetica", size=FONT_SIZE)

    widths = _column_widths(pdf, table, headers)
    chunks = _column_chunks(widths, pdf.epw) or [[]]

    for n, chunk in enumerate(chunks):
        pdf.add_page()
        pdf.set_font("Helvetica", size=TITLE_FONT_SIZE)
        chunk_title = title if len(chunks) == 1 else f"{title} (part {n + 1} of {len(chunks)})"
        pdf.cell(0, 8, chunk_title, new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", size=FONT_SIZE)

        if not chunk:
            continue

        with pdf.table(
                col_widths=tuple(widths[i] for i in chunk),
                width=sum(widths[i] for i in chunk),
                align="LEFT",
                text_align="LEFT",
                line_height=LINE_HEIGHT,
                headings_style=FontFace(emphasis="BOLD", color=255, fill_color=HEADER_FILL),
                cell_fill_color=STRIPE_FILL,
                cell_fill_mode="ROWS",
        ) as pdf_table:
            heading = pdf_table.row()
            for i in chunk:
                heading.cell(headers[i])
            for values in table:
                line = pdf_table.row()
                for i in chunk:
                    line.cell(values[i])

    return pdf


def to_paginated_document(
        rows: Sequence[Mapping[str, Any]],
        columns: Sequence[str],
        dataset_name: str,
        now: Optional[datetime] = None,
        max_chars: int = MAX_CELL_CHARS,
) -> bytes:
    return bytes(build_document(rows, columns, dataset_name, now, max_chars).output())


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
class ExportService:
    """
    Encodes the currently filtered rows for download.

    When an archive storage backend is configured, every export is also
    written there under exports/<filename>.
    """

    KINDS = ("csv", "pdf")

    def __init__(self, *, max_cell_chars: int = MAX_CELL_CHARS, archive: Optional[StorageBackend] = None):
        self.max_cell_chars = max_cell_chars
        self.archive = archive

    def export(
            self,
            kind: str,
            rows: Sequence[Mapping[str, Any]],
            columns: Sequence[str],
            dataset_name: str,
            now: Optional[datetime] = None,
    ) -> Tuple[str, bytes]:
        now = now or datetime.now()
        if kind == "csv":
            filename = export_filename(dataset_name, "csv", now)
            data = to_delimited_text(rows, columns).encode("utf-8")
        elif kind == "pdf":
            filename = export_filename(dataset_name, "pdf", now)
            data = to_paginated_document(rows, columns, dataset_name, now, self.max_cell_chars)
        else:
            raise ValueError(f"Unknown export kind: {kind!r}")

        logger.info(
            "Exported rows",
            extra={"dataset": dataset_name, "kind": kind, "n_rows": len(rows), "file": filename},
        )

        if self.archive is not None:
            try:
                self.archive.write_bytes(f"exports/{archive_name(filename)}", data)
            except (OSError, ValueError):
                logger.exception("Failed to archive export", extra={"file": filename})

        return filename, data
