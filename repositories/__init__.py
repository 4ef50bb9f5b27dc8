"""
Repository layer for data access abstraction.

This module provides a clean separation between business logic and database operations,
following the Repository pattern for better testability and maintainability.
"""

from repositories.base_repository import BaseRepository
from repositories.customer_repository import CustomerRepository
from repositories.business_identity_repository import BusinessIdentityRepository
from repositories.quotation_repository import QuotationFilters, QuotationRepository

__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "BusinessIdentityRepository",
    "QuotationRepository",
    "QuotationFilters",
]
