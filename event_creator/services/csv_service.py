"""
CSV parsing and column mapping for guest uploads
"""

import io
import re
from typing import Dict, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel

from event_creator.schemas.guest import ColumnMapping, GuestDraft

class ColumnMappingError(ValueError):
    """Mapping refers to a missing header or leaves Name unmapped"""

class ParsedCsv(BaseModel):
    """Headers and rows read from an upload"""
    success: bool
    errors: List[str] = []
    headers: List[str] = []
    rows: List[Dict[str, str]] = []
    # Original 1-based line number of each row
    line_numbers: List[int] = []

class CsvService:
    """Service for reading guest lists"""

    COLUMN_PATTERNS = {
        "name": re.compile(r"name", re.IGNORECASE),
        "email": re.compile(r"email|e-mail", re.IGNORECASE),
        "phone": re.compile(r"phone|mobile|tel", re.IGNORECASE),
    }

    @staticmethod
    def _clean(value: str) -> str:
        """Trim and strip one layer of surrounding double quotes"""
        value = value.strip()
        if value.startswith('"'):
            value = value[1:]
        if value.endswith('"'):
            value = value[:-1]
        return value

    @staticmethod
    def parse_csv(text: str) -> ParsedCsv:
        """Split raw text into headers and rows.

        Splitting is naive: commas inside quoted fields are not supported.
        Lines are numbered before blank ones are dropped, so each row keeps
        the line it came from.
        """
        numbered = [
            (number, line)
            for number, line in enumerate(text.split("\n"), start=1)
            if line.strip()
        ]
        if not numbered:
            return ParsedCsv(success=False, errors=["CSV file is empty"])

        headers = [CsvService._clean(h) for h in numbered[0][1].split(",")]

        rows = []
        line_numbers = []
        for number, line in numbered[1:]:
            values = [CsvService._clean(v) for v in line.split(",")]
            row = {}
            for index, header in enumerate(headers):
                row[header] = values[index] if index < len(values) else ""
            rows.append(row)
            line_numbers.append(number)

        return ParsedCsv(success=True, headers=headers, rows=rows, line_numbers=line_numbers)

    @staticmethod
    def parse_excel(file_content: bytes) -> ParsedCsv:
        """Read the first sheet of a workbook into the same shape as a CSV"""
        try:
            df = pd.read_excel(io.BytesIO(file_content), dtype=str)
        except Exception as e:
            return ParsedCsv(success=False, errors=[f"Error reading Excel file: {str(e)}"])

        df = df.fillna("")
        headers = [str(col).strip() for col in df.columns]
        if not headers:
            return ParsedCsv(success=False, errors=["CSV file is empty"])

        rows = []
        line_numbers = []
        for index, (_, record) in enumerate(df.iterrows()):
            values = [str(v).strip() for v in record.tolist()]
            if not any(values):
                continue
            rows.append(dict(zip(headers, values)))
            # Header occupies line 1
            line_numbers.append(index + 2)

        return ParsedCsv(success=True, headers=headers, rows=rows, line_numbers=line_numbers)

    @staticmethod
    def parse_upload(filename: str, file_content: bytes) -> ParsedCsv:
        """Dispatch on file extension"""
        lowered = (filename or "").lower()
        if lowered.endswith((".xlsx", ".xls")):
            return CsvService.parse_excel(file_content)
        if not lowered.endswith(".csv"):
            return ParsedCsv(
                success=False,
                errors=["Invalid file format. Please upload a CSV file (.csv) or an Excel file (.xlsx)"]
            )
        try:
            text = file_content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return ParsedCsv(success=False, errors=["File must be UTF-8 encoded text"])
        return CsvService.parse_csv(text)

    @staticmethod
    def detect_columns(headers: List[str]) -> ColumnMapping:
        """First header matching each field's pattern"""
        mapping = {}
        for field, pattern in CsvService.COLUMN_PATTERNS.items():
            mapping[field] = next((h for h in headers if pattern.search(h)), None)
        return ColumnMapping(**mapping)

    @staticmethod
    def apply_overrides(
        mapping: ColumnMapping,
        overrides: Optional[Dict[str, Optional[str]]],
        headers: List[str]
    ) -> ColumnMapping:
        """User choices replace detected headers; empty string unmaps a field"""
        if not overrides:
            return mapping

        updated = mapping.model_dump()
        for field, header in overrides.items():
            if field not in CsvService.COLUMN_PATTERNS:
                raise ColumnMappingError(f"Unknown guest field '{field}'")
            if header is None:
                continue
            if header == "":
                updated[field] = None
            elif header not in headers:
                raise ColumnMappingError(f"Column '{header}' not found in file")
            else:
                updated[field] = header
        return ColumnMapping(**updated)

    @staticmethod
    def validate_mapping(mapping: ColumnMapping) -> Tuple[bool, List[str]]:
        errors = []
        if not mapping.name:
            errors.append("Please map the Name column")
        return len(errors) == 0, errors

    @staticmethod
    def preview_rows(
        rows: List[Dict[str, str]],
        mapping: ColumnMapping,
        limit: int = 5
    ) -> List[Dict[str, str]]:
        return [
            {
                "name": row.get(mapping.name, "") if mapping.name else "",
                "email": row.get(mapping.email, "") if mapping.email else "",
                "phone": row.get(mapping.phone, "") if mapping.phone else "",
            }
            for row in rows[:limit]
        ]

    @staticmethod
    def parse_guest_list(text: str) -> List[GuestDraft]:
        """Positional reader used when creating an event from a guest list.

        Columns are name, email, phone in that order. Both name and email
        are required; a first line mentioning "name" is treated as headers.
        """
        lines = [line for line in text.split("\n") if line.strip()]
        if not lines:
            return []

        start_index = 1 if "name" in lines[0].lower() else 0
        guests = []
        for line in lines[start_index:]:
            parts = [p.strip() for p in line.split(",")]
            if len(parts) >= 2 and parts[0] and parts[1]:
                guests.append(GuestDraft(
                    name=parts[0],
                    email=parts[1],
                    phone=parts[2] if len(parts) > 2 and parts[2] else None
                ))
        return guests
