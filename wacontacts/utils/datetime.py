"""
Utilities for standardized datetime handling.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.
    
    Returns:
        datetime: Current UTC time
    """
    return datetime.now(timezone.utc)


def utc_today_iso() -> str:
    """Current UTC date as YYYY-MM-DD, used in export file names."""
    return utc_now().date().isoformat()
