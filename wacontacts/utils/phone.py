"""
Phone number cleanup utilities.
"""
import re

# Whitespace, dashes and parentheses are formatting only
_PHONE_FORMATTING_RGX = re.compile(r"[\s\-\(\)]")


def strip_phone_formatting(raw: str) -> str:
    """
    Remove formatting characters from a raw phone value.

    Only whitespace, '-', '(' and ')' are removed. A leading '+' and any
    other characters are kept for the backend to validate.

    Args:
        raw: Phone value as it appears in the CSV cell

    Returns:
        str: The cleaned phone number, or "" for a blank/missing value
    """
    if not isinstance(raw, str):
        return ""
    return _PHONE_FORMATTING_RGX.sub("", raw).strip()
