"""
Customer Resolver - map request contact data onto one canonical customer row.
"""

from __future__ import annotations
import logging

from sqlalchemy.orm import Session

from core.db import acquire_advisory_lock
from core.models import Customer
from domain.models.customer import (
    CustomerInfo,
    ResolutionMode,
    UseExisting,
    CreateOrMergeByIdentity,
    AlwaysCreateNew,
)
from repositories import CustomerRepository
from shared.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CustomerResolver:
    """
    Resolves a customer for a quotation write.

    Modes:
    - UseExisting: look the customer up by id, no mutation
    - CreateOrMergeByIdentity: reuse the customer with the same (name,
      email) and overwrite its contact fields with the non-empty new
      values, or create one
    - AlwaysCreateNew: insert unconditionally
    """

    def resolve(self, session: Session, info: CustomerInfo, mode: ResolutionMode) -> Customer:
        """
        Resolve `info` to a persisted customer in the caller's unit of work.

        Raises:
            ValidationError: If the customer name is blank
            NotFoundError: If UseExisting references an unknown id
        """
        name = info.require_name()
        customers = CustomerRepository(session)

        if isinstance(mode, UseExisting):
            customer = customers.get_by_id(mode.customer_id)
            if customer is None:
                raise NotFoundError("Customer", mode.customer_id)
            return customer

        if isinstance(mode, CreateOrMergeByIdentity):
            acquire_advisory_lock(session, f"customer:{name}\x1f{info.email or ''}")
            existing = customers.find_by_identity(name, info.email)
            if existing is not None:
                changes = {
                    k: v for k, v in info.non_empty_fields().items()
                    if getattr(existing, k) != v
                }
                if changes:
                    customers.update(existing, **changes)
                    logger.debug(f"Merged customer {existing.id}: {sorted(changes)}")
                return existing
            return self._create(customers, info)

        if isinstance(mode, AlwaysCreateNew):
            return self._create(customers, info)

        raise TypeError(f"Unknown customer resolution mode: {mode!r}")

    def _create(self, customers: CustomerRepository, info: CustomerInfo) -> Customer:
        customer = customers.create(**info.non_empty_fields())
        logger.debug(f"Created customer {customer.id}")
        return customer
