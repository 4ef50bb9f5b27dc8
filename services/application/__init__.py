"""
Application Services - Orchestration and cross-cutting concerns.

This module contains services that open a unit of work, orchestrate the
domain services inside it and return serialized payloads.
"""

from services.application.quotation_writer import QuotationWriter
from services.application.business_identity_service import BusinessIdentityService
from services.application.customer_service import CustomerService

__all__ = [
    "QuotationWriter",
    "BusinessIdentityService",
    "CustomerService",
]
