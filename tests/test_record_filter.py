from app.services.record_filter import ValidRecord, filter_valid_records
from app.services.record_parser import CandidateRecord


def test_rows_missing_name_or_phone_are_dropped():
    candidates = [
        CandidateRecord(first_name="A", phone="1"),
        CandidateRecord(first_name="", phone="2"),
        CandidateRecord(first_name="B", phone=""),
    ]
    assert filter_valid_records(candidates) == [ValidRecord(first_name="A", phone="1", notes="")]


def test_whitespace_only_counts_as_empty():
    candidates = [CandidateRecord(first_name="   ", phone="1"), CandidateRecord(first_name="C", phone=" \t")]
    assert filter_valid_records(candidates) == []


def test_order_and_notes_preserved():
    candidates = [
        CandidateRecord(first_name="A", phone="1", notes="first"),
        CandidateRecord(first_name="", phone=""),
        CandidateRecord(first_name="B", phone="2", notes=""),
        CandidateRecord(first_name="C", phone="3", notes="vip"),
    ]
    valid = filter_valid_records(candidates)
    assert [(v.first_name, v.notes) for v in valid] == [("A", "first"), ("B", ""), ("C", "vip")]


def test_empty_input():
    assert filter_valid_records([]) == []
