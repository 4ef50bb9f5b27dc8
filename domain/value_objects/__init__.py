"""
Value Objects for domain models.

Value objects are immutable objects defined by their attributes rather
than their identity: quotation numbers and quotation money totals.
"""

from domain.value_objects.quotation_number import QuotationNumber
from domain.value_objects.totals import QuotationTotals

__all__ = [
    "QuotationNumber",
    "QuotationTotals",
]
