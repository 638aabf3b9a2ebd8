from wacontacts.schemas.import_session import ColumnMapping
from wacontacts.services.imports.normalizer import (
    mapped_preview, normalize_row, normalize_rows, parse_manual_entries, split_tags
)

FULL_MAPPING = ColumnMapping(name=0, phone=1, email=2, tags=3)


def test_normalizes_phone_and_collapses_duplicate_tags():
    record = normalize_row(["John Doe", "(987) 654-3210", "", "vip;gold;vip"], FULL_MAPPING)
    assert record is not None
    assert record.phone == "9876543210"
    assert record.name == "John Doe"
    assert record.email == ""
    assert set(record.tags) == {"vip", "gold"}
    assert len(record.tags) == 2


def test_blank_phone_is_skipped():
    assert normalize_row(["Jane", "", "jane@example.com", ""], FULL_MAPPING) is None
    assert normalize_row(["Jane", "   ", "", ""], FULL_MAPPING) is None
    assert normalize_row(["Jane", "( ) - ", "", ""], FULL_MAPPING) is None


def test_short_row_reads_missing_cells_as_empty():
    mapping = ColumnMapping(phone=0, name=5, email=6, tags=7)
    record = normalize_row(["+91 98765-43210"], mapping)
    assert record.phone == "+919876543210"
    assert record.name == ""
    assert record.email == ""
    assert record.tags == []


def test_phone_past_end_of_row_is_skipped():
    assert normalize_row(["A"], ColumnMapping(phone=3)) is None


def test_unmapped_fields_default_to_empty():
    record = normalize_row(["111", "Bob", "bob@example.com"], ColumnMapping(phone=0))
    assert record.name == ""
    assert record.email == ""
    assert record.tags == []


def test_values_are_trimmed():
    record = normalize_row(["  Ann  ", " 222 ", " ann@example.com ", " a ; ; b "], FULL_MAPPING)
    assert record.name == "Ann"
    assert record.phone == "222"
    assert record.email == "ann@example.com"
    assert record.tags == ["a", "b"]


def test_split_tags_drops_empty_parts():
    assert split_tags(";;") == []
    assert split_tags("") == []


def test_normalize_rows_discards_rows_without_phone():
    rows = [["A", "111"], ["B", ""], ["C", "333"]]
    records = normalize_rows(rows, ColumnMapping(name=0, phone=1))
    assert [r.phone for r in records] == ["111", "333"]


def test_mapped_preview_marks_unmapped_fields():
    preview = mapped_preview([["A", "111"], ["B"]], ColumnMapping(name=0, phone=1))
    assert preview[0].model_dump() == {"phone": "111", "name": "A", "email": "-", "tags": "-"}
    assert preview[1].phone == ""


def test_parse_manual_entries():
    text = "+91 98765 43210, Asha, asha@example.com\n\n,No Phone\n12345\n"
    records = parse_manual_entries(text)
    assert len(records) == 2
    assert records[0].phone == "+919876543210"
    assert records[0].name == "Asha"
    assert records[0].email == "asha@example.com"
    assert records[1].phone == "12345"
    assert records[1].name == ""
    assert records[1].email == ""
