"""
Quotation totals value object.

Holds the caller-computed money figures of a quotation and checks the
arithmetic identities between them instead of recomputing them, so that
client-side calculation bugs surface as validation errors.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from shared.constants import AMOUNT_TOLERANCE, DEFAULT_TAX_RATE
from shared.exceptions import ValidationError
from shared.utilities import amounts_match
from shared.validators import validate_non_negative, validate_tax_rate


@dataclass(frozen=True)
class QuotationTotals:
    """Subtotal, GST rate (percent), GST amount and grand total."""

    subtotal: float
    tax_rate: float
    tax_amount: float
    total_amount: float

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], default_tax_rate: float = DEFAULT_TAX_RATE
    ) -> QuotationTotals:
        raw_rate = payload.get("taxRate")
        return cls(
            subtotal=validate_non_negative(payload.get("subtotal"), "subtotal"),
            tax_rate=validate_tax_rate(default_tax_rate if raw_rate is None else raw_rate),
            tax_amount=validate_non_negative(payload.get("taxAmount"), "taxAmount"),
            total_amount=validate_non_negative(payload.get("totalAmount"), "totalAmount"),
        )

    @property
    def expected_tax_amount(self) -> float:
        return self.subtotal * self.tax_rate / 100.0

    @property
    def expected_total_amount(self) -> float:
        return self.subtotal + self.tax_amount

    def validate(self, tolerance: float = AMOUNT_TOLERANCE) -> QuotationTotals:
        """
        Check taxAmount = subtotal * taxRate / 100 and total = subtotal + taxAmount.

        Raises:
            ValidationError: If either identity is off by the tolerance or more
        """
        if not amounts_match(self.tax_amount, self.expected_tax_amount, tolerance):
            raise ValidationError(
                "taxAmount does not equal subtotal * taxRate / 100",
                field="taxAmount",
                details={
                    "expected": round(self.expected_tax_amount, 4),
                    "received": self.tax_amount,
                },
            )
        if not amounts_match(self.total_amount, self.expected_total_amount, tolerance):
            raise ValidationError(
                "totalAmount does not equal subtotal + taxAmount",
                field="totalAmount",
                details={
                    "expected": round(self.expected_total_amount, 4),
                    "received": self.total_amount,
                },
            )
        return self

    def validate_lines(
        self, line_totals: Iterable[float], tolerance: float = AMOUNT_TOLERANCE
    ) -> QuotationTotals:
        """Check subtotal = sum of the line totals."""
        expected = sum(line_totals)
        if not amounts_match(self.subtotal, expected, tolerance):
            raise ValidationError(
                "subtotal does not equal the sum of item line totals",
                field="subtotal",
                details={"expected": round(expected, 4), "received": self.subtotal},
            )
        return self
