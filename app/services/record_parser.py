"""
Tabular upload parsing.

Turns a CSV or xlsx payload into CandidateRecord rows keyed on the
FirstName / Phone / Notes headers. Validity is not checked here.
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Iterable

from openpyxl import load_workbook

from app.services.list_errors import ParseError, UnsupportedFileTypeError


FIRST_NAME_HEADER = "FirstName"
PHONE_HEADER = "Phone"
NOTES_HEADER = "Notes"


class SourceFormat(str, Enum):
    CSV = "csv"
    SPREADSHEET = "spreadsheet"


_FORMAT_BY_SUFFIX = {
    ".csv": SourceFormat.CSV,
    ".xlsx": SourceFormat.SPREADSHEET,
}


@dataclass(frozen=True)
class CandidateRecord:
    first_name: str
    phone: str
    notes: str = ""


def source_format_for_filename(file_name: str) -> SourceFormat:
    """Declared type comes from the file extension; content is never sniffed."""
    suffix = PurePath(file_name or "").suffix.lower()
    try:
        return _FORMAT_BY_SUFFIX[suffix]
    except KeyError:
        raise UnsupportedFileTypeError("Only CSV and XLSX files are allowed") from None


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    # Spreadsheets hand back phone numbers as floats; 5551234.0 -> "5551234"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _records_from_rows(header: Iterable[Any], rows: Iterable[Iterable[Any]]) -> list[CandidateRecord]:
    columns = [_cell_text(h) for h in header]
    if not any(columns):
        raise ParseError("File has no header row")

    index = {name: idx for idx, name in reversed(list(enumerate(columns))) if name}
    name_idx = index.get(FIRST_NAME_HEADER)
    phone_idx = index.get(PHONE_HEADER)
    notes_idx = index.get(NOTES_HEADER)

    def pick(row: list[Any], idx: int | None) -> str:
        if idx is None or idx >= len(row):
            return ""
        return _cell_text(row[idx])

    records: list[CandidateRecord] = []
    for raw in rows:
        row = list(raw)
        records.append(CandidateRecord(
            first_name=pick(row, name_idx),
            phone=pick(row, phone_idx),
            notes=pick(row, notes_idx),
        ))
    return records


def parse_csv(payload: bytes) -> list[CandidateRecord]:
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"CSV is not valid UTF-8: {e.reason}") from e

    try:
        # csv.reader yields [] for blank lines, leading ones included
        rows = [r for r in csv.reader(io.StringIO(text, newline=""), strict=True) if r]
    except csv.Error as e:
        raise ParseError(f"Malformed CSV: {e}") from e

    if not rows:
        raise ParseError("File has no header row")
    return _records_from_rows(rows[0], rows[1:])


def _read_first_sheet(payload: bytes) -> list[CandidateRecord]:
    workbook = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
    try:
        if not workbook.worksheets:
            raise ParseError("Workbook has no sheets")
        sheet = workbook.worksheets[0]

        # read-only sheets parse their XML lazily, row by row
        rows = sheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            raise ParseError("File has no header row")

        body = [r for r in rows if any(cell is not None and _cell_text(cell) != "" for cell in r)]
        return _records_from_rows(header, body)
    finally:
        workbook.close()


def parse_spreadsheet(payload: bytes) -> list[CandidateRecord]:
    try:
        return _read_first_sheet(payload)
    except ParseError:
        raise
    except Exception as e:  # openpyxl surfaces zip, XML and value errors alike
        raise ParseError("Error parsing Excel file") from e


def parse_records(payload: bytes, source_format: SourceFormat) -> list[CandidateRecord]:
    if source_format is SourceFormat.CSV:
        return parse_csv(payload)
    if source_format is SourceFormat.SPREADSHEET:
        return parse_spreadsheet(payload)
    raise UnsupportedFileTypeError(f"Unsupported source format: {source_format!r}")
