"""
Header-based column auto-detection.
"""
import logging
from typing import Dict, List, Optional, Tuple

from wacontacts.schemas.import_session import ColumnMapping

logger = logging.getLogger("wacontacts.imports.mapper")

# Checked in this order; a header is assigned to the first field it matches
FIELD_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("phone", ("phone", "mobile", "number", "whatsapp")),
    ("name", ("name", "contact")),
    ("email", ("email", "mail")),
    ("tags", ("tag", "label", "group")),
)


def classify_header(header: str) -> Optional[str]:
    """
    Return the contact field a header most likely holds.

    Args:
        header: Header text from the CSV

    Returns:
        Optional[str]: "phone", "name", "email", "tags" or None
    """
    lowered = header.lower().strip()
    for field, keywords in FIELD_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return field
    return None


def detect_column_mapping(headers: List[str]) -> ColumnMapping:
    """
    Propose a column mapping from header names.

    The first column matching a field wins; later matches are ignored.
    Fields with no matching column stay unset. The result is only a
    default and callers may replace it.

    Args:
        headers: Parsed header row

    Returns:
        ColumnMapping: Suggested mapping
    """
    assigned: Dict[str, int] = {}
    for index, header in enumerate(headers):
        field = classify_header(header)
        if field is not None and field not in assigned:
            assigned[field] = index

    mapping = ColumnMapping(**assigned)
    logger.debug(f"Detected column mapping {mapping.model_dump()} for headers {headers}")
    return mapping
