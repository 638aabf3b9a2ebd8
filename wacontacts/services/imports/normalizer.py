"""
Row normalization: mapped CSV rows to canonical contact records.

Nothing in here raises on bad data. Missing cells read as empty strings and
only a blank phone causes a row to be dropped.
"""
import logging
from typing import List, Optional

from wacontacts.schemas.contact import ContactRecord
from wacontacts.schemas.import_session import ColumnMapping, MappedPreviewRow
from wacontacts.services.imports.parser import split_lines
from wacontacts.utils.phone import strip_phone_formatting

logger = logging.getLogger("wacontacts.imports.normalizer")

TAG_SEPARATOR = ";"
UNMAPPED_PLACEHOLDER = "-"


def cell(row: List[str], index: Optional[int]) -> str:
    """Value at index, or "" when unmapped or past the end of a ragged row."""
    if index is None or index >= len(row):
        return ""
    return row[index]


def split_tags(raw: str) -> List[str]:
    """Split a tag cell on ';', dropping blanks and repeats."""
    tags = (part.strip() for part in raw.split(TAG_SEPARATOR))
    return list(dict.fromkeys(tag for tag in tags if tag))


def normalize_row(row: List[str], mapping: ColumnMapping) -> Optional[ContactRecord]:
    """
    Convert one parsed row into a contact record.

    Args:
        row: Parsed CSV fields
        mapping: Column mapping to apply

    Returns:
        Optional[ContactRecord]: The record, or None if the row has no phone
    """
    phone = strip_phone_formatting(cell(row, mapping.phone))
    if not phone:
        return None

    return ContactRecord(
        phone=phone,
        name=cell(row, mapping.name).strip(),
        email=cell(row, mapping.email).strip(),
        tags=split_tags(cell(row, mapping.tags)) if mapping.tags is not None else [],
    )


def normalize_rows(rows: List[List[str]], mapping: ColumnMapping) -> List[ContactRecord]:
    """Normalize every row, discarding the ones without a phone."""
    records = []
    for row_number, row in enumerate(rows, start=2):
        record = normalize_row(row, mapping)
        if record is None:
            logger.debug(f"Skipping CSV row {row_number}: empty phone")
            continue
        records.append(record)
    return records


def mapped_preview(rows: List[List[str]], mapping: ColumnMapping) -> List[MappedPreviewRow]:
    """
    Show what each preview row yields under a mapping, before cleanup.

    Unmapped fields show "-" so they can be told apart from empty cells.
    """
    def value(row: List[str], index: Optional[int]) -> str:
        return UNMAPPED_PLACEHOLDER if index is None else cell(row, index)

    return [
        MappedPreviewRow(
            phone=value(row, mapping.phone),
            name=value(row, mapping.name),
            email=value(row, mapping.email),
            tags=value(row, mapping.tags),
        )
        for row in rows
    ]


def parse_manual_entries(text: str) -> List[ContactRecord]:
    """
    Parse quick-entry text with one "phone,name,email" per line.

    Lines are split on plain commas (no quote handling) and there is no
    header. Lines without a phone are dropped.
    """
    records = []
    for line in split_lines(text):
        parts = [part.strip() for part in line.split(",")]
        phone = strip_phone_formatting(parts[0])
        if not phone:
            continue
        records.append(ContactRecord(
            phone=phone,
            name=parts[1] if len(parts) > 1 else "",
            email=parts[2] if len(parts) > 2 else "",
        ))
    return records
