"""
Domain Services - Pure business logic layer.

This module contains services that implement core business rules and domain logic.
Each service works on a session handed in by the caller so that several of
them can take part in one atomic unit of work.
"""

from services.domain.sequence_allocator import SequenceAllocator
from services.domain.customer_resolver import CustomerResolver
from services.domain.default_identity import DefaultIdentityManager
from services.domain.status_machine import QuotationStatusMachine

__all__ = [
    "SequenceAllocator",
    "CustomerResolver",
    "DefaultIdentityManager",
    "QuotationStatusMachine",
]
