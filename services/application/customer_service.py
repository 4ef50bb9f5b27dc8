"""
Customer Service - direct customer maintenance outside quotation writes.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional
import logging

from core.models import Customer
from domain.models.customer import CustomerInfo
from repositories import CustomerRepository
from services.application.serializers import customer_to_dict, quotation_summary_to_dict
from services.application.unit_of_work import atomic
from shared.constants import DEFAULT_CUSTOMER_PAGE_SIZE, RECENT_CUSTOMER_QUOTATIONS
from shared.exceptions import ConflictError, NotFoundError
from shared.types import CustomerListPayload
from shared.utilities import pagination_block
from shared.validators import validate_page

logger = logging.getLogger(__name__)

_FIELDS = ("name", "email", "phone", "address", "gst_number")


class CustomerService:
    """Application service for customers."""

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a customer.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a customer with the same name and email exists
        """
        info = CustomerInfo.from_payload(payload)
        name = info.require_name()

        with atomic("create customer") as session:
            customers = CustomerRepository(session)
            self._check_duplicate(customers, name, info.email)
            customer = customers.create(**{f: getattr(info, f) for f in _FIELDS})
            result = dict(customer_to_dict(customer), quotationCount=0)

        logger.info(f"Created customer {result['id']}")
        return result

    def list(self, page: Any = 1, limit: Any = None, search: Optional[str] = None) -> CustomerListPayload:
        """Customers ordered by name; `search` matches name, email or phone."""
        page, limit = validate_page(page, limit, default_limit=DEFAULT_CUSTOMER_PAGE_SIZE)
        search = (search or "").strip() or None

        with atomic("list customers") as session:
            customers = CustomerRepository(session)
            rows, total = customers.list_customers(search=search, page=page, limit=limit)
            counts = customers.quotation_counts([c.id for c in rows])
            return {
                "customers": [
                    dict(customer_to_dict(c), quotationCount=counts.get(c.id, 0)) for c in rows
                ],
                "pagination": pagination_block(page, limit, total),
            }

    def get(self, customer_id: str) -> Dict[str, Any]:
        """Customer with its quotation count and latest quotations."""
        with atomic("load customer") as session:
            customers = CustomerRepository(session)
            customer = self._require(customers, customer_id)
            recent = customers.recent_quotations(customer.id, RECENT_CUSTOMER_QUOTATIONS)
            return dict(
                customer_to_dict(customer),
                quotationCount=customers.count_quotations(customer.id),
                quotations=[quotation_summary_to_dict(q) for q in recent],
            )

    def update(self, customer_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Replace a customer's contact details.

        Raises:
            NotFoundError: Unknown customer
            ValidationError: Blank name
            ConflictError: Another customer already has this name and email
        """
        info = CustomerInfo.from_payload(payload)

        with atomic("update customer") as session:
            customers = CustomerRepository(session)
            customer = self._require(customers, customer_id)
            name = info.require_name()
            self._check_duplicate(customers, name, info.email, exclude_id=customer.id)
            customers.update(customer, **{f: getattr(info, f) for f in _FIELDS})
            result = dict(
                customer_to_dict(customer),
                quotationCount=customers.count_quotations(customer.id),
            )

        logger.info(f"Updated customer {customer_id}")
        return result

    def delete(self, customer_id: str) -> None:
        """
        Delete a customer that owns no quotations.

        Raises:
            ConflictError: If quotations still reference the customer
        """
        with atomic("delete customer") as session:
            customers = CustomerRepository(session)
            customer = self._require(customers, customer_id)
            count = customers.count_quotations(customer.id)
            if count > 0:
                raise ConflictError(
                    "Cannot delete customer with existing quotations",
                    details={"quotationCount": count},
                )
            customers.delete(customer)

        logger.info(f"Deleted customer {customer_id}")

    def _check_duplicate(self, customers: CustomerRepository, name: str, email, exclude_id=None) -> None:
        # Customers without an email are never duplicates of each other here
        if email is None:
            return
        if customers.find_by_identity(name, email, exclude_id=exclude_id) is not None:
            raise ConflictError(
                "Customer with this name and email already exists",
                details={"name": name, "email": email},
            )

    def _require(self, customers: CustomerRepository, customer_id: str) -> Customer:
        customer = customers.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer
