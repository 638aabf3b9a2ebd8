"""
CSV line parser for the contact import pipeline.

Input arrives as a whole text blob (an uploaded file or pasted text). It is
split into physical lines first and each line is tokenized on its own, so a
quote left open on one line never leaks into the next.
"""
from typing import List, Tuple

from wacontacts.core.exceptions import ValidationError

QUOTE = '"'
DELIMITER = ","


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into trimmed fields.

    Double quotes toggle quoted mode and are dropped from the output; a
    comma inside quotes is part of the field. Escaped quotes ("") are not
    recognised. An unbalanced quote keeps the remainder of the line in a
    single field.

    Args:
        line: One line of text, without its newline

    Returns:
        List[str]: Fields in column order; an empty line gives [""]
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def split_lines(text: str) -> List[str]:
    """Split text on newlines and drop blank lines."""
    return [line for line in text.split("\n") if line.strip()]


def read_csv_text(text: str) -> Tuple[List[str], List[str]]:
    """
    Parse the header and collect the raw data lines of a CSV text.

    Args:
        text: Full CSV text, first non-blank line is the header

    Returns:
        Tuple[List[str], List[str]]: (header fields, unparsed data lines)

    Raises:
        ValidationError: If there is no header plus at least one data line
    """
    lines = split_lines(text)
    if len(lines) < 2:
        raise ValidationError(
            message="CSV file must have headers and at least one data row",
            code="CSV_TOO_SHORT",
            details={"line_count": len(lines)},
        )
    return parse_csv_line(lines[0]), lines[1:]
