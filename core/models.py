"""Facade re-export for ORM models.

All real model definitions live under core/db_models/.
"""

# flake8: noqa

from core.db import Base

from core.db_models.parties import Customer, BusinessIdentity
from core.db_models.catalog import Category, Product
from core.db_models.quotation import Quotation, QuotationItem

__all__ = [
    # Base
    "Base",
    # Parties
    "Customer",
    "BusinessIdentity",
    # Catalog
    "Category",
    "Product",
    # Quotations
    "Quotation",
    "QuotationItem",
]
