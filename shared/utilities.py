"""
Common utility functions used throughout the application.

This module provides reusable helpers for string normalisation, numeric
comparison, timestamps and pagination.
"""

import math
from typing import Any, Dict, Optional, Union
from datetime import datetime, date, timezone


# =================== STRING UTILITIES ===================

def safe_string(value: Any, default: str = "") -> str:
    """
    Safely convert value to a trimmed string.

    Args:
        value: Value to convert
        default: Default string if value is None

    Returns:
        String representation
    """
    if value is None:
        return default

    try:
        return str(value).strip()
    except Exception:
        return default


def normalize_string(value: Any, lowercase: bool = False) -> Optional[str]:
    """
    Normalize string by trimming and optionally lowercasing.

    Args:
        value: Value to normalize
        lowercase: Whether to convert to lowercase

    Returns:
        Normalized string or None if empty
    """
    if value is None:
        return None

    normalized = safe_string(value)
    if not normalized:
        return None

    return normalized.lower() if lowercase else normalized


# =================== NUMERIC UTILITIES ===================

def amounts_match(left: float, right: float, tolerance: float) -> bool:
    """True when two monetary amounts differ by strictly less than `tolerance`."""
    if not (math.isfinite(left) and math.isfinite(right)):
        return False
    return abs(left - right) < tolerance


# =================== DATE UTILITIES ===================

def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_or_none(dt: Optional[Union[datetime, date]]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


# =================== PAGINATION ===================

def pagination_block(page: int, limit: int, total: int) -> Dict[str, int]:
    """
    Pagination metadata for list responses.

    Args:
        page: Current page (1-based)
        limit: Items per page
        total: Total matching rows

    Returns:
        Dict with page, limit, total and pages
    """
    pages = (total + limit - 1) // limit if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
    }
