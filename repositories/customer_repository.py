"""
Customer Repository for handling customer-related database operations.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from core.models import Customer, Quotation
import logging

logger = logging.getLogger(__name__)


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customer operations."""

    def __init__(self, session: Session):
        super().__init__(Customer, session)

    def find_by_identity(
        self,
        name: str,
        email: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> Optional[Customer]:
        """
        Get the customer identified by exact (name, email).

        A missing email only matches customers stored without one. The
        oldest match wins if duplicates were created in AlwaysCreateNew mode.
        """
        def query_func(session: Session) -> Optional[Customer]:
            query = session.query(Customer).filter(Customer.name == name)
            if email is None:
                query = query.filter(Customer.email.is_(None))
            else:
                query = query.filter(Customer.email == email)
            if exclude_id is not None:
                query = query.filter(Customer.id != exclude_id)
            return query.order_by(Customer.created_at.asc(), Customer.id.asc()).first()

        return self.execute_query(query_func)

    def count_quotations(self, customer_id: str) -> int:
        """Number of quotations referencing the customer."""
        def query_func(session: Session) -> int:
            return (
                session.query(Quotation)
                .filter(Quotation.customer_id == customer_id)
                .count()
            )

        return self.execute_query(query_func) or 0

    def recent_quotations(self, customer_id: str, limit: int) -> List[Quotation]:
        """Latest quotations of a customer, newest first."""
        def query_func(session: Session) -> List[Quotation]:
            return (
                session.query(Quotation)
                .filter(Quotation.customer_id == customer_id)
                .order_by(Quotation.created_at.desc())
                .limit(limit)
                .all()
            )

        return self.execute_query(query_func) or []

    def list_customers(
        self,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Customer], int]:
        """Page of customers ordered by name, with the total match count."""
        def query_func(session: Session) -> Tuple[List[Customer], int]:
            query = session.query(Customer)
            if search:
                pattern = f"%{search}%"
                query = query.filter(
                    or_(
                        Customer.name.ilike(pattern),
                        Customer.email.ilike(pattern),
                        Customer.phone.ilike(pattern),
                    )
                )
            total = query.count()
            rows = (
                query.order_by(Customer.name.asc(), Customer.id.asc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return rows, total

        return self.execute_query(query_func)

    def quotation_counts(self, customer_ids: Sequence[str]) -> Dict[str, int]:
        """Quotation count per customer id; ids without quotations are omitted."""
        if not customer_ids:
            return {}

        def query_func(session: Session) -> Dict[str, int]:
            rows = (
                session.query(Quotation.customer_id, func.count(Quotation.id))
                .filter(Quotation.customer_id.in_(list(customer_ids)))
                .group_by(Quotation.customer_id)
                .all()
            )
            return {customer_id: count for customer_id, count in rows}

        return self.execute_query(query_func)
