"""
import_engine.parser - Turn an uploaded spreadsheet into ImportRows.

Responsibilities:
  • MIME allow-list, checked before a single byte is parsed
  • Upload size cap, enforced while reading
  • Content sniffing: .xlsx (ZIP) via openpyxl, otherwise CSV text
  • Header normalisation onto logical field names (field_map)
  • Cell values flattened to stripped strings; typing happens later

Rows stay untyped string maps here.  A missing column is not a parse
error: it shows up as a MissingField error on every row.
"""

from __future__ import annotations

import csv
import io
import logging
from contextlib import closing
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import BinaryIO, Iterable, Iterator, Optional, Sequence

from openpyxl import load_workbook

import config
from import_engine.errors import (
    EmptyFile, FileTooLarge, TooManyRows, UnreadableFile, UnsupportedFormat,
)
from import_engine.field_map import normalise_header
from import_engine.report import ValidationError

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME  = "application/vnd.ms-excel"
CSV_MIME  = "text/csv"

ALLOWED_MIME_TYPES = frozenset({XLSX_MIME, XLS_MIME, CSV_MIME})

_ZIP_MAGIC = b"PK\x03\x04"
_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


@dataclass
class ImportRow:
    """One spreadsheet line.  Lives only for the duration of a call."""
    ordinal: int                                  # physical row, header = 1
    fields: dict[str, str]
    errors: list[ValidationError] = field(default_factory=list)
    record: Optional[object] = None               # EmployeeRecord once valid

    @property
    def ok(self) -> bool:
        return not self.errors

    def get(self, name: str) -> str:
        return self.fields.get(name, "")


# ── Public API ─────────────────────────────────────────────────────────

def parse_upload(
    content: bytes | BinaryIO,
    mimetype: str,
    *,
    max_bytes: int | None = None,
    max_rows: int | None = None,
) -> list[ImportRow]:
    """
    Validate the declared MIME type, read at most max_bytes, and return
    rows in physical order.  Raises an ImportFormatError subclass when
    the file as a whole is unusable.
    """
    max_bytes = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    max_rows = config.MAX_ROWS if max_rows is None else max_rows

    base_type = (mimetype or "").split(";", 1)[0].strip().lower()
    if base_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedFormat(
            f"Invalid file type {mimetype!r}. Only Excel (.xlsx) and CSV files are allowed."
        )

    raw = read_capped(content, max_bytes)
    if not raw.strip():
        raise EmptyFile("No data found in the file")

    if raw.startswith(_ZIP_MAGIC):
        records = _xlsx_records(raw)
    elif raw.startswith(_OLE_MAGIC):
        raise UnreadableFile(
            "Legacy .xls workbooks are not supported; save the file as .xlsx or CSV"
        )
    else:
        records = _csv_records(_decode(raw))

    with closing(records):
        rows = list(_rows_from_records(records, max_rows))
    if not rows:
        raise EmptyFile("No data found in the file")

    logger.info(f"Parsed {len(rows)} data rows ({base_type}, {len(raw)} bytes)")
    return rows


def read_capped(content: bytes | BinaryIO, max_bytes: int) -> bytes:
    """Read up to max_bytes; one byte more means the file is too large."""
    if isinstance(content, (bytes, bytearray)):
        raw = bytes(content[: max_bytes + 1])
    else:
        raw = content.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise FileTooLarge(f"File exceeds the {max_bytes} byte upload limit")
    return raw


# ── Record sources ─────────────────────────────────────────────────────

def _xlsx_records(raw: bytes) -> Iterator[tuple]:
    # read_only streams the sheet XML, so the row cap bounds memory
    try:
        wb = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except Exception as exc:
        raise UnreadableFile(f"Could not read Excel file: {exc}") from exc

    try:
        if wb.worksheets:
            yield from wb.worksheets[0].iter_rows(values_only=True)
    finally:
        wb.close()


def _csv_records(text: str) -> Iterator[list]:
    try:
        yield from csv.reader(io.StringIO(text))
    except csv.Error as exc:
        raise UnreadableFile(f"Could not read CSV file: {exc}") from exc


def _decode(raw: bytes) -> str:
    # Strip UTF-8 BOM
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    # Excel on Windows exports CSV in the ANSI code page
    try:
        return raw.decode("cp1252")
    except UnicodeDecodeError as exc:
        raise UnreadableFile("File is neither UTF-8 nor Windows-1252 text") from exc


# ── Row assembly ───────────────────────────────────────────────────────

def _rows_from_records(records: Iterable[Sequence], max_rows: int) -> Iterator[ImportRow]:
    it = iter(records)
    header = next(it, None)
    if header is None:
        return

    # column index → logical field name; unknown headers dropped
    columns: dict[int, str] = {}
    for idx, cell in enumerate(header):
        name = normalise_header(cell_text(cell))
        if name and name not in columns.values():
            columns[idx] = name

    count = 0
    for ordinal, values in enumerate(it, start=2):          # row 1 = header
        cells = [cell_text(v) for v in values]
        if not any(cells):
            continue
        count += 1
        if count > max_rows:
            raise TooManyRows(f"File has more than {max_rows} data rows")
        fields = {
            name: cells[idx] if idx < len(cells) else ""
            for idx, name in columns.items()
        }
        yield ImportRow(ordinal=ordinal, fields=fields)


def cell_text(value) -> str:
    """Flatten one spreadsheet cell to a stripped string."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
