"""
Guest import pipeline: parsed rows + confirmed mapping -> guest drafts
"""

import logging
from typing import Dict, List, Optional, Tuple

from event_creator.schemas.guest import ColumnMapping, GuestDraft, ImportPreview, ImportResult
from event_creator.services.csv_service import CsvService, ParsedCsv

logger = logging.getLogger(__name__)

UNNAMED_GUEST = "Unnamed Guest"

class GuestImportService:
    """Turns uploaded guest lists into guest drafts"""

    @staticmethod
    def build_guest_drafts(
        rows: List[Dict[str, str]],
        mapping: ColumnMapping,
        line_numbers: Optional[List[int]] = None
    ) -> Tuple[ImportResult, List[GuestDraft]]:
        """Map every row to a draft and drop those without a name.

        Blank names become the "Unnamed Guest" placeholder and are then
        filtered out together with any empty name, so a row with no name is
        never imported.
        """
        valid, errors = CsvService.validate_mapping(mapping)
        if not valid:
            return ImportResult(success=False, message=errors[0], errors=errors), []

        if line_numbers is None:
            line_numbers = list(range(2, len(rows) + 2))

        drafts = []
        skipped_lines = []
        for row, line_number in zip(rows, line_numbers):
            draft = GuestDraft(
                name=row.get(mapping.name, "") or UNNAMED_GUEST,
                email=row.get(mapping.email, "") if mapping.email else None,
                phone=row.get(mapping.phone, "") if mapping.phone else None,
            )
            if not draft.name or draft.name == UNNAMED_GUEST:
                skipped_lines.append(line_number)
                continue
            drafts.append(draft)

        failed = len(rows) - len(drafts)
        if not drafts:
            return ImportResult(
                success=False,
                message="No valid guests found in the CSV",
                failed=failed,
                errors=["No valid guests found in the CSV"],
                skipped_lines=skipped_lines,
            ), []

        return ImportResult(
            success=True,
            message=f"Successfully imported {len(drafts)} guests",
            imported=len(drafts),
            failed=failed,
            skipped_lines=skipped_lines,
        ), drafts

    @staticmethod
    def prepare(
        parsed: ParsedCsv,
        overrides: Optional[Dict[str, Optional[str]]] = None
    ) -> Tuple[ImportResult, List[GuestDraft]]:
        """Full pipeline from a parsed upload"""
        if not parsed.success:
            return ImportResult(success=False, message=parsed.errors[0], errors=parsed.errors), []

        mapping = CsvService.detect_columns(parsed.headers)
        mapping = CsvService.apply_overrides(mapping, overrides, parsed.headers)

        result, drafts = GuestImportService.build_guest_drafts(
            parsed.rows, mapping, parsed.line_numbers
        )
        logger.info(
            f"Import prepared: {result.imported} accepted, {result.failed} skipped "
            f"out of {len(parsed.rows)} rows"
        )
        return result, drafts

    @staticmethod
    def preview(parsed: ParsedCsv) -> ImportPreview:
        """Headers, detected mapping and the first rows, for the mapping step"""
        mapping = CsvService.detect_columns(parsed.headers)
        return ImportPreview(
            headers=parsed.headers,
            mapping=mapping,
            total_rows=len(parsed.rows),
            preview=CsvService.preview_rows(parsed.rows, mapping),
        )
