"""
Tests for CSV parsing and column mapping
"""

import io

import pandas as pd
import pytest

from event_creator.schemas.guest import ColumnMapping
from event_creator.services.csv_service import ColumnMappingError, CsvService
from event_creator.services.export_service import ExportService

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

def test_parse_simple_csv():
    parsed = CsvService.parse_csv("Name,Email,Phone\nAda,ada@x.com,123")

    assert parsed.success
    assert parsed.headers == ["Name", "Email", "Phone"]
    assert parsed.rows == [{"Name": "Ada", "Email": "ada@x.com", "Phone": "123"}]
    assert parsed.line_numbers == [2]

def test_parse_template_round_trip():
    parsed = CsvService.parse_csv(ExportService.csv_template())

    assert parsed.headers == ["Name", "Email", "Phone"]
    assert [row["Name"] for row in parsed.rows] == ["John Doe", "Jane Smith"]

def test_empty_csv():
    for text in ("", "   \n\n  \n"):
        parsed = CsvService.parse_csv(text)
        assert not parsed.success
        assert parsed.errors == ["CSV file is empty"]

def test_header_only_csv():
    parsed = CsvService.parse_csv("Name,Email\n")

    assert parsed.success
    assert parsed.rows == []

def test_line_numbers_survive_blank_lines():
    parsed = CsvService.parse_csv("Name,Email\n\nAda,a@x.com\n\n\nBob,b@x.com\n")

    assert parsed.line_numbers == [3, 6]

def test_missing_and_extra_values():
    parsed = CsvService.parse_csv("Name,Email,Phone\nAda\nBob,b@x.com,1,extra")

    assert parsed.rows[0] == {"Name": "Ada", "Email": "", "Phone": ""}
    assert parsed.rows[1] == {"Name": "Bob", "Email": "b@x.com", "Phone": "1"}

def test_quotes_and_whitespace_are_stripped():
    parsed = CsvService.parse_csv('"Full Name" , "E-mail"\n "Ada Lovelace" ,"ada@x.com"\r')

    assert parsed.headers == ["Full Name", "E-mail"]
    assert parsed.rows[0] == {"Full Name": "Ada Lovelace", "E-mail": "ada@x.com"}

def test_detect_columns():
    mapping = CsvService.detect_columns(["Guest Name", "E-mail Address", "Mobile Number"])

    assert mapping == ColumnMapping(name="Guest Name", email="E-mail Address", phone="Mobile Number")

def test_detect_columns_first_match_wins():
    mapping = CsvService.detect_columns(["First Name", "Last Name", "Notes"])

    assert mapping.name == "First Name"
    assert mapping.email is None
    assert mapping.phone is None

def test_apply_overrides():
    headers = ["Guest", "Contact", "Phone"]
    mapping = CsvService.detect_columns(headers)

    updated = CsvService.apply_overrides(
        mapping, {"name": "Guest", "email": "Contact", "phone": ""}, headers
    )

    assert updated == ColumnMapping(name="Guest", email="Contact", phone=None)

def test_apply_overrides_keeps_unset_fields():
    headers = ["Name", "Email"]
    mapping = CsvService.detect_columns(headers)

    assert CsvService.apply_overrides(mapping, {"name": None}, headers) == mapping

def test_apply_overrides_rejects_unknown_header():
    headers = ["Name", "Email"]

    with pytest.raises(ColumnMappingError):
        CsvService.apply_overrides(ColumnMapping(), {"email": "Mail"}, headers)

def test_validate_mapping_requires_name():
    valid, errors = CsvService.validate_mapping(ColumnMapping(email="Email"))

    assert not valid
    assert errors == ["Please map the Name column"]

def test_preview_rows_limited_to_five():
    rows = [{"Name": f"Guest {i}", "Email": ""} for i in range(8)]
    preview = CsvService.preview_rows(rows, ColumnMapping(name="Name", email="Email"))

    assert len(preview) == 5
    assert preview[0] == {"name": "Guest 0", "email": "", "phone": ""}

def test_parse_upload_excel():
    content = create_test_excel({
        "Name": ["Ada", None, "Bob"],
        "Email": ["ada@x.com", None, "bob@x.com"],
    })

    parsed = CsvService.parse_upload("guests.xlsx", content)

    assert parsed.success
    assert parsed.headers == ["Name", "Email"]
    assert [row["Name"] for row in parsed.rows] == ["Ada", "Bob"]
    assert parsed.line_numbers == [2, 4]

def test_parse_upload_rejects_other_formats():
    parsed = CsvService.parse_upload("guests.txt", b"Name\nAda")

    assert not parsed.success
    assert "Invalid file format" in parsed.errors[0]

def test_parse_upload_strips_bom():
    parsed = CsvService.parse_upload("guests.csv", "\ufeffName,Email\nAda,a@x.com".encode("utf-8"))

    assert parsed.headers == ["Name", "Email"]

def test_parse_guest_list():
    guests = CsvService.parse_guest_list(
        "name,email,phone\nAda,ada@x.com,555\nNo Email\nBob,bob@x.com\n,x@x.com"
    )

    assert [g.name for g in guests] == ["Ada", "Bob"]
    assert guests[0].phone == "555"
    assert guests[1].phone is None

def test_parse_guest_list_without_header():
    guests = CsvService.parse_guest_list("Ada,ada@x.com")

    assert len(guests) == 1
    assert guests[0].email == "ada@x.com"
