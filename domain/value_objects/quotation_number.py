"""
Quotation number value object.

Human-readable quotation identifiers of the form ``QUO-YYYYMMDD-NNN``:
a prefix, the issue date and a three digit random suffix.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
import re

from shared.constants import (
    QUOTATION_NUMBER_PREFIX,
    QUOTATION_NUMBER_DATE_FORMAT,
    QUOTATION_NUMBER_SUFFIX_DIGITS,
    QUOTATION_NUMBER_PATTERN,
)
from shared.exceptions import ValidationError


_PATTERN = re.compile(QUOTATION_NUMBER_PATTERN)
_MAX_SUFFIX = 10 ** QUOTATION_NUMBER_SUFFIX_DIGITS - 1


@dataclass(frozen=True)
class QuotationNumber:
    """
    Immutable quotation number.

    Examples: QUO-20261018-042, QUO-20260101-999
    """

    value: str

    def __init__(self, number: str):
        """
        Create QuotationNumber with validation and normalization.

        Args:
            number: Raw quotation number string

        Raises:
            ValidationError: If the number does not match PREFIX-YYYYMMDD-NNN
        """
        if not number or not isinstance(number, str):
            raise ValidationError("Quotation number cannot be empty", field="quotationNumber")

        normalized = number.strip().upper()
        if not _PATTERN.match(normalized):
            raise ValidationError(
                f"Invalid quotation number: {number}", field="quotationNumber"
            )

        # Date part must be a real calendar date
        try:
            datetime.strptime(normalized.split("-")[1], QUOTATION_NUMBER_DATE_FORMAT)
        except ValueError:
            raise ValidationError(
                f"Invalid date in quotation number: {number}", field="quotationNumber"
            )

        object.__setattr__(self, 'value', normalized)

    @classmethod
    def from_parts(
        cls,
        issued_on: date,
        suffix: int,
        prefix: str = QUOTATION_NUMBER_PREFIX,
    ) -> QuotationNumber:
        """Build a number from its issue date and numeric suffix (0-999)."""
        if not 0 <= suffix <= _MAX_SUFFIX:
            raise ValidationError(f"Quotation number suffix out of range: {suffix}")
        stamp = issued_on.strftime(QUOTATION_NUMBER_DATE_FORMAT)
        return cls(f"{prefix}-{stamp}-{suffix:0{QUOTATION_NUMBER_SUFFIX_DIGITS}d}")

    @property
    def prefix(self) -> str:
        return self.value.split("-")[0]

    @property
    def issued_on(self) -> date:
        return datetime.strptime(self.value.split("-")[1], QUOTATION_NUMBER_DATE_FORMAT).date()

    @property
    def suffix(self) -> int:
        return int(self.value.split("-")[2])

    def __str__(self) -> str:
        return self.value
