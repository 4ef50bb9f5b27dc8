"""
Reusable validators and validation utilities.

This module provides common validation functions used throughout the application
to ensure data consistency and eliminate validation logic duplication.
"""

import math
from datetime import datetime, time
from typing import Any, List, Optional, Tuple

from shared.constants import (
    MAX_TAX_RATE,
    QUOTATION_STATUSES,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    QUOTATION_SORT_FIELDS,
    SORT_ORDERS,
)
from shared.exceptions import ValidationError
from shared.utilities import normalize_string, to_naive_utc


# =================== TEXT VALIDATION ===================

def validate_required_text(value: Any, field: str, label: Optional[str] = None) -> str:
    """
    Validate a required free-text field.

    Args:
        value: Raw input value
        field: Request field name (reported back to the caller)
        label: Human readable name used in the message

    Returns:
        Trimmed, non-empty string

    Raises:
        ValidationError: If the value is missing or blank after trimming
    """
    text = normalize_string(value)
    if text is None:
        raise ValidationError(f"{label or field} is required", field=field)
    return text


def optional_text(value: Any) -> Optional[str]:
    """Trim a free-text value, turning blanks into None."""
    return normalize_string(value)


# =================== NUMERIC VALIDATION ===================

def validate_number(value: Any, field: str) -> float:
    """
    Validate that a value is a finite number.

    Raises:
        ValidationError: If value is missing, not numeric or not finite
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be finite", field=field)
    return number


def validate_positive(value: Any, field: str) -> float:
    number = validate_number(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero", field=field)
    return number


def validate_non_negative(value: Any, field: str) -> float:
    number = validate_number(value, field)
    if number < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return number


def validate_tax_rate(value: Any, field: str = "taxRate") -> float:
    rate = validate_non_negative(value, field)
    if rate > MAX_TAX_RATE:
        raise ValidationError(
            f"{field} cannot exceed {MAX_TAX_RATE:g}", field=field,
            details={"max": MAX_TAX_RATE}
        )
    return rate


# =================== LIFECYCLE VALIDATION ===================

def validate_status_literal(value: Any) -> str:
    """
    Validate a quotation status literal.

    Literals are matched exactly; "sent" is not "SENT".

    Raises:
        ValidationError: If the literal is not one of the known statuses
    """
    if not isinstance(value, str) or value not in QUOTATION_STATUSES:
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(QUOTATION_STATUSES),
            field="status",
            details={"allowed": list(QUOTATION_STATUSES), "received": value}
        )
    return value


def validate_status_filter(value: Optional[str]) -> List[str]:
    """Status filter for list queries; None or "all" means no filter."""
    if value is None or value == "all":
        return []
    return [validate_status_literal(v.strip()) for v in value.split(",") if v.strip()]


# =================== PAGINATION ===================

def validate_page(page: Any, limit: Any, default_limit: int = DEFAULT_PAGE_SIZE) -> tuple:
    """
    Clamp pagination arguments.

    Returns:
        (page, limit) with page >= 1 and 1 <= limit <= MAX_PAGE_SIZE
    """
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = default_limit
    return max(page, 1), min(max(limit, 1), MAX_PAGE_SIZE)


# =================== LIST FILTERS ===================

def validate_sort(sort_by: Any, sort_order: Any) -> Tuple[str, str]:
    """
    Validate a quotation list ordering.

    Raises:
        ValidationError: Unknown sort field or order
    """
    if sort_by not in QUOTATION_SORT_FIELDS:
        raise ValidationError(
            "sortBy must be one of: " + ", ".join(QUOTATION_SORT_FIELDS),
            field="sortBy",
            details={"allowed": list(QUOTATION_SORT_FIELDS), "received": sort_by}
        )
    if sort_order not in SORT_ORDERS:
        raise ValidationError("sortOrder must be 'asc' or 'desc'", field="sortOrder")
    return sort_by, sort_order


def validate_date_bound(value: Any, field: str, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or timestamp used as a range bound.

    A bare date (YYYY-MM-DD) is the start of that day, or its last
    instant when `end_of_day` is set. Aware timestamps become naive UTC.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    text = normalize_string(value)
    if text is None:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            f"{field} must be an ISO-8601 date", field=field, details={"received": text}
        )
    if end_of_day and len(text) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return to_naive_utc(parsed)


def validate_range(low: Any, high: Any, low_field: str, high_field: str) -> None:
    """Reject a range whose lower bound lies above its upper bound."""
    if low is not None and high is not None and low > high:
        raise ValidationError(
            f"{low_field} cannot be after {high_field}",
            field=low_field,
            details={low_field: str(low), high_field: str(high)}
        )
