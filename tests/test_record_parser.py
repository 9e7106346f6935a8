import io
import zipfile

import pytest
from openpyxl import Workbook

from app.services.list_errors import ParseError, UnsupportedFileTypeError
from app.services.record_parser import (
    CandidateRecord,
    SourceFormat,
    parse_records,
    source_format_for_filename,
)


def _xlsx(*sheets: list[list]) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for idx, rows in enumerate(sheets):
        ws = wb.create_sheet(title=f"Sheet{idx + 1}")
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_csv_maps_known_headers_and_trims():
    payload = b"FirstName,Phone,Notes,City\n  Ann , 555-1 ,  call back ,Nicosia\nBob,555-2,,Limassol\n"
    records = parse_records(payload, SourceFormat.CSV)
    assert records == [
        CandidateRecord(first_name="Ann", phone="555-1", notes="call back"),
        CandidateRecord(first_name="Bob", phone="555-2", notes=""),
    ]


def test_csv_without_notes_column_defaults_to_empty():
    records = parse_records(b"Phone,FirstName\n1,A\n2,B\n", SourceFormat.CSV)
    assert [(r.first_name, r.phone, r.notes) for r in records] == [("A", "1", ""), ("B", "2", "")]


def test_csv_headers_are_case_sensitive():
    records = parse_records(b"firstname,phone\nA,1\n", SourceFormat.CSV)
    assert records == [CandidateRecord(first_name="", phone="", notes="")]


def test_csv_keeps_row_order_and_short_rows():
    payload = b"\xef\xbb\xbfFirstName,Phone,Notes\nA,1\n\nB,2,x\nC\n"
    records = parse_records(payload, SourceFormat.CSV)
    assert [r.first_name for r in records] == ["A", "B", "C"]
    assert records[2].phone == ""


def test_csv_header_only_is_empty_not_error():
    assert parse_records(b"FirstName,Phone,Notes\n", SourceFormat.CSV) == []


@pytest.mark.parametrize("payload", [b"", b"\n", b",,\n"])
def test_csv_without_header_row_fails(payload):
    with pytest.raises(ParseError):
        parse_records(payload, SourceFormat.CSV)


def test_csv_undecodable_fails():
    with pytest.raises(ParseError):
        parse_records(b"FirstName,Phone\n\xff\xfe\x00bad,1\n", SourceFormat.CSV)


def test_spreadsheet_reads_first_sheet_and_coerces_numbers():
    payload = _xlsx(
        [["FirstName", "Phone", "Notes"], ["Ann", 5551234567, None], [" Bob ", 5559876543.0, 42]],
        [["FirstName", "Phone"], ["Ignored", "0"]],
    )
    records = parse_records(payload, SourceFormat.SPREADSHEET)
    assert records == [
        CandidateRecord(first_name="Ann", phone="5551234567", notes=""),
        CandidateRecord(first_name="Bob", phone="5559876543", notes="42"),
    ]


def test_spreadsheet_skips_blank_rows():
    payload = _xlsx([["FirstName", "Phone"], ["A", "1"], [None, None], ["B", "2"]])
    records = parse_records(payload, SourceFormat.SPREADSHEET)
    assert [r.first_name for r in records] == ["A", "B"]


def test_spreadsheet_header_only_is_empty():
    assert parse_records(_xlsx([["FirstName", "Phone", "Notes"]]), SourceFormat.SPREADSHEET) == []


def test_spreadsheet_corrupt_payload_fails():
    with pytest.raises(ParseError):
        parse_records(b"FirstName,Phone\nA,1\n", SourceFormat.SPREADSHEET)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("leads.csv", SourceFormat.CSV),
        ("LEADS.CSV", SourceFormat.CSV),
        ("leads.xlsx", SourceFormat.SPREADSHEET),
    ],
)
def test_source_format_follows_declared_extension(name, expected):
    assert source_format_for_filename(name) is expected


@pytest.mark.parametrize("name", ["leads.txt", "leads", "", "leads.csv.pdf", "old.xls"])
def test_unknown_extension_rejected(name):
    with pytest.raises(UnsupportedFileTypeError):
        source_format_for_filename(name)


def test_csv_leading_blank_lines_before_header():
    records = parse_records(b"\n\nFirstName,Phone\nA,1\n", SourceFormat.CSV)
    assert records == [CandidateRecord(first_name="A", phone="1", notes="")]


def _replace_member(payload: bytes, member: str, content: bytes) -> bytes:
    src = zipfile.ZipFile(io.BytesIO(payload))
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as dst:
        for info in src.infolist():
            data = content if info.filename == member else src.read(info.filename)
            dst.writestr(info, data)
    return buf.getvalue()


@pytest.mark.parametrize("member", ["xl/worksheets/sheet1.xml", "xl/workbook.xml"])
def test_spreadsheet_with_malformed_xml_fails_as_parse_error(member):
    good = _xlsx([["FirstName", "Phone"], ["A", "1"]])
    payload = _replace_member(good, member, b"<<bad")

    with pytest.raises(ParseError):
        parse_records(payload, SourceFormat.SPREADSHEET)
