"""
Quotation Repository for the quotation aggregate and its line items.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from repositories.base_repository import BaseRepository
from core.models import Customer, Product, Quotation, QuotationItem
from shared.constants import DEFAULT_SORT_FIELD
import logging

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "createdAt": Quotation.created_at,
    "quotationNumber": Quotation.quotation_number,
    "customerName": Customer.name,
    "totalAmount": Quotation.total_amount,
    "status": Quotation.status,
    "validUntil": Quotation.valid_until,
}


@dataclass(frozen=True)
class QuotationFilters:
    """
    Conditions shared by the list page and its summary figures.

    `created_to` and `max_amount` are inclusive bounds.
    """

    statuses: Sequence[str] = ()
    search: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None

    def without_status(self) -> QuotationFilters:
        return replace(self, statuses=())


def _aggregate_options():
    return (
        joinedload(Quotation.customer),
        joinedload(Quotation.business_identity),
        selectinload(Quotation.items)
        .joinedload(QuotationItem.product)
        .joinedload(Product.category),
    )


class QuotationRepository(BaseRepository[Quotation]):
    """Repository for Quotation operations."""

    def __init__(self, session: Session):
        super().__init__(Quotation, session)

    def number_exists(self, quotation_number: str) -> bool:
        """Check whether a quotation number is already taken."""
        def query_func(session: Session) -> bool:
            return session.query(
                session.query(Quotation.id)
                .filter(Quotation.quotation_number == quotation_number)
                .exists()
            ).scalar()

        return bool(self.execute_query(query_func))

    def get_aggregate(self, quotation_id: str) -> Optional[Quotation]:
        """Quotation with customer, identity and items (plus products) loaded."""
        def query_func(session: Session) -> Optional[Quotation]:
            return (
                session.query(Quotation)
                .options(*_aggregate_options())
                .filter(Quotation.id == quotation_id)
                .populate_existing()
                .first()
            )

        return self.execute_query(query_func)

    def replace_items(self, quotation: Quotation, items: Sequence[QuotationItem]) -> None:
        """Delete every existing item of the quotation and attach `items`."""
        def query_func(session: Session) -> None:
            quotation.items.clear()
            # Old rows must be gone before the new ones are inserted
            session.flush()
            quotation.items.extend(items)
            session.flush()

        self.execute_query(query_func)

    def _filtered(self, session: Session, filters: QuotationFilters):
        # Every quotation has a customer, so the inner join drops nothing
        query = session.query(Quotation).join(Quotation.customer)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.filter(
                or_(
                    Quotation.quotation_number.ilike(pattern),
                    Quotation.title.ilike(pattern),
                    Quotation.description.ilike(pattern),
                    Customer.name.ilike(pattern),
                    Customer.email.ilike(pattern),
                )
            )
        if filters.statuses:
            query = query.filter(Quotation.status.in_(list(filters.statuses)))
        if filters.created_from is not None:
            query = query.filter(Quotation.created_at >= filters.created_from)
        if filters.created_to is not None:
            query = query.filter(Quotation.created_at <= filters.created_to)
        if filters.min_amount is not None:
            query = query.filter(Quotation.total_amount >= filters.min_amount)
        if filters.max_amount is not None:
            query = query.filter(Quotation.total_amount <= filters.max_amount)
        return query

    def list_quotations(
        self,
        filters: QuotationFilters = QuotationFilters(),
        page: int = 1,
        limit: int = 20,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_order: str = "desc",
    ) -> Tuple[List[Quotation], int]:
        """
        Page of quotations plus the total number of matches.

        Args:
            filters: Status, search, creation date and amount conditions
            page: 1-based page
            limit: Page size
            sort_by: camelCase sort key, one of QUOTATION_SORT_FIELDS
            sort_order: "asc" or "desc"
        """
        def query_func(session: Session) -> Tuple[List[Quotation], int]:
            query = self._filtered(session, filters)
            total = query.count()
            column = _SORT_COLUMNS[sort_by]
            ordering = column.asc() if sort_order == "asc" else column.desc()
            rows = (
                query.options(*_aggregate_options())
                .order_by(ordering, Quotation.id.asc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return rows, total

        return self.execute_query(query_func)

    def status_counts(self, filters: QuotationFilters = QuotationFilters()) -> Dict[str, int]:
        """Per-status counts over the filters, ignoring any status filter."""
        def query_func(session: Session) -> Dict[str, int]:
            query = self._filtered(session, filters.without_status())
            rows = (
                query.with_entities(Quotation.status, func.count(Quotation.id))
                .group_by(Quotation.status)
                .all()
            )
            return {status: count for status, count in rows}

        return self.execute_query(query_func)

    def total_value(self, filters: QuotationFilters = QuotationFilters()) -> float:
        """Sum of totalAmount over the filtered quotations."""
        def query_func(session: Session) -> float:
            query = self._filtered(session, filters)
            return query.with_entities(func.coalesce(func.sum(Quotation.total_amount), 0.0)).scalar()

        return float(self.execute_query(query_func) or 0.0)
