# wacontacts/services/imports/orchestrator.py
"""
Import session: the upload -> mapping -> preview -> done workflow.

One ImportSession per file selection. It owns the parsed header, the raw
data lines and the mapping until it is reset or closed. The only async step
is the final batch submission to the contacts backend.
"""
import logging
from typing import List, Optional

from wacontacts.core.config import settings
from wacontacts.core.exceptions import ImportStateError, ValidationError, WacontactsException
from wacontacts.schemas.contact import ContactRecord, ImportResult
from wacontacts.schemas.import_session import (
    ColumnMapping, ImportSessionResponse, ImportStep, MAPPED_FIELDS, MappedPreviewRow
)
from wacontacts.services.contacts.client import ContactsAPIClient
from wacontacts.services.imports.mapper import detect_column_mapping
from wacontacts.services.imports.normalizer import mapped_preview, normalize_rows
from wacontacts.services.imports.parser import parse_csv_line, read_csv_text
from wacontacts.utils.datetime import utc_now
from wacontacts.utils.error_handling import error_to_dict
from wacontacts.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("wacontacts.imports.orchestrator")


class ImportSession:
    """
    State machine for one contact import.

    Forward moves: load_text (UPLOAD -> MAPPING), to_preview
    (MAPPING -> PREVIEW), submit (PREVIEW -> DONE). back() steps
    PREVIEW -> MAPPING or MAPPING -> UPLOAD, and reset() starts over.
    """

    def __init__(self, owner: str, preview_limit: Optional[int] = None):
        """
        Initialize an empty session in the UPLOAD step.

        Args:
            owner: Opaque key of the user the session belongs to
            preview_limit: Data rows to keep for preview (defaults to settings)
        """
        self.id = generate_prefixed_id(IDPrefix.IMPORT)
        self.owner = owner
        self.preview_limit = preview_limit or settings.IMPORT_PREVIEW_ROWS
        self.created_at = utc_now()
        self._clear()

    def _clear(self) -> None:
        self.step = ImportStep.UPLOAD
        self.filename: Optional[str] = None
        self.headers: List[str] = []
        self.data_lines: List[str] = []
        self.preview_rows: List[List[str]] = []
        self.mapping = ColumnMapping()
        self.submitting = False
        self.last_error = None
        self.result: Optional[ImportResult] = None
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()

    def _require(self, step: ImportStep, action: str) -> None:
        if self.step != step:
            raise ImportStateError(
                message=f"Cannot {action} while in {self.step.value} step",
                details={"step": self.step.value, "expected": step.value},
            )

    @property
    def row_count(self) -> int:
        """Number of non-blank data lines loaded."""
        return len(self.data_lines)

    def load_text(self, text: str, filename: Optional[str] = None) -> int:
        """
        Load CSV text and move to the mapping step.

        Args:
            text: Full CSV text including the header line
            filename: Name of the uploaded file, if any

        Returns:
            int: Number of data rows found

        Raises:
            ImportStateError: If not in the upload step
            ValidationError: If the text has fewer than two non-blank lines
        """
        self._require(ImportStep.UPLOAD, "load a file")
        headers, data_lines = read_csv_text(text)

        self.filename = filename
        self.headers = headers
        self.data_lines = data_lines
        self.preview_rows = [parse_csv_line(line) for line in data_lines[:self.preview_limit]]
        self.mapping = detect_column_mapping(headers)
        self.step = ImportStep.MAPPING
        self.touch()

        logger.info(
            f"Import {self.id}: loaded {self.row_count} rows with {len(headers)} columns"
            f"{f' from {filename}' if filename else ''}"
        )
        return self.row_count

    def update_mapping(self, mapping: ColumnMapping) -> None:
        """
        Replace the column mapping.

        Raises:
            ImportStateError: If not in the mapping step
            ValidationError: If a mapped index is past the last header
        """
        self._require(ImportStep.MAPPING, "change the column mapping")
        assigned = {field: getattr(mapping, field) for field in MAPPED_FIELDS}
        out_of_range = {
            field: index for field, index in assigned.items()
            if index is not None and index >= len(self.headers)
        }
        if out_of_range:
            raise ValidationError(
                message="Mapped column does not exist in the CSV header",
                code="COLUMN_OUT_OF_RANGE",
                details={"columns": out_of_range, "header_count": len(self.headers)},
            )
        self.mapping = mapping
        self.touch()

    def to_preview(self) -> None:
        """
        Move from mapping to preview.

        Raises:
            ValidationError: If no phone column is mapped
        """
        self._require(ImportStep.MAPPING, "preview")
        if not self.mapping.is_complete:
            raise ValidationError(
                message="Please map the Phone column",
                code="PHONE_COLUMN_REQUIRED",
            )
        self.step = ImportStep.PREVIEW
        self.touch()

    def back(self) -> None:
        """Step back one stage. Leaving mapping discards the loaded file."""
        if self.step == ImportStep.PREVIEW:
            self.step = ImportStep.MAPPING
            self.last_error = None
            self.touch()
        elif self.step == ImportStep.MAPPING:
            self._clear()
        else:
            raise ImportStateError(
                message=f"Cannot go back from {self.step.value} step",
                details={"step": self.step.value},
            )

    def reset(self) -> None:
        """Discard everything and return to the upload step."""
        self._clear()

    def build_records(self) -> List[ContactRecord]:
        """Parse every data line and normalize it with the current mapping."""
        rows = [parse_csv_line(line) for line in self.data_lines]
        return normalize_rows(rows, self.mapping)

    def mapped_preview(self) -> List[MappedPreviewRow]:
        return mapped_preview(self.preview_rows, self.mapping)

    async def submit(self, client: ContactsAPIClient) -> ImportResult:
        """
        Send all normalized contacts to the backend in one batch.

        On failure the session stays in the preview step with last_error set,
        so the caller can retry without uploading again.

        Args:
            client: Contacts API client bound to the caller's token

        Returns:
            ImportResult: Counts reported by the backend

        Raises:
            ImportStateError: If not in the preview step
            ValidationError: If no row has a phone number
            ContactsAPIError: If the backend call fails
        """
        self._require(ImportStep.PREVIEW, "submit")
        records = self.build_records()
        if not records:
            raise ValidationError(
                message="No valid contacts found",
                code="NO_VALID_CONTACTS",
                details={"rows": self.row_count},
            )

        logger.info(
            f"Import {self.id}: submitting {len(records)} of {self.row_count} rows "
            f"({self.row_count - len(records)} without phone)"
        )
        self.submitting = True
        self.last_error = None
        self.touch()
        try:
            result = await client.import_contacts(records)
        except WacontactsException as e:
            self.last_error = error_to_dict(e)
            logger.error(f"Import {self.id}: submission failed: {e.message}")
            raise
        finally:
            self.submitting = False
            self.touch()

        # The user may have stepped back or reset while the request was pending
        if self.step == ImportStep.PREVIEW:
            self.result = result
            self.step = ImportStep.DONE
        else:
            logger.info(f"Import {self.id}: result arrived after leaving preview, not recorded")
        logger.info(f"Import {self.id}: done, {result.imported} imported, {result.error_count} errors")
        return result

    def to_response(self) -> ImportSessionResponse:
        return ImportSessionResponse(
            id=self.id,
            step=self.step,
            filename=self.filename,
            headers=self.headers,
            row_count=self.row_count,
            preview_rows=self.preview_rows,
            mapped_preview=self.mapped_preview(),
            mapping=self.mapping,
            submitting=self.submitting,
            last_error=self.last_error,
            result=self.result,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
