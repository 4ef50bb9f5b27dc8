"""
Quotation Writer - create, update, read, list and delete quotations.

Each write is one atomic unit: customer resolution, number allocation,
item materialisation and the quotation row itself commit together or not
at all.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Optional, Sequence
import logging

from sqlalchemy.orm import Session

from config import get_config
from config.base import BaseConfig
from core.models import BusinessIdentity, Quotation, QuotationItem
from domain.models.quotation import CatalogLine, LineItem, QuotationRequest, QuotationStatus
from repositories import BusinessIdentityRepository, QuotationFilters, QuotationRepository
from services.application.serializers import quotation_to_dict
from services.application.unit_of_work import atomic
from services.domain import (
    CustomerResolver,
    DefaultIdentityManager,
    QuotationStatusMachine,
    SequenceAllocator,
)
from services.infrastructure.catalog_reader import CatalogReader
from shared.constants import DEFAULT_SORT_FIELD
from shared.exceptions import NotFoundError, ValidationError
from shared.types import QuotationListPayload, QuotationPayload
from shared.utilities import pagination_block
from shared.validators import (
    validate_date_bound,
    validate_number,
    validate_page,
    validate_range,
    validate_sort,
    validate_status_filter,
)

logger = logging.getLogger(__name__)


class QuotationWriter:
    """
    Application service owning the quotation aggregate.

    Collaborators are injectable so tests can pin the clock and the
    random suffix of the allocator.
    """

    def __init__(
        self,
        allocator: Optional[SequenceAllocator] = None,
        catalog: Optional[CatalogReader] = None,
        resolver: Optional[CustomerResolver] = None,
        default_identity: Optional[DefaultIdentityManager] = None,
        status_machine: Optional[QuotationStatusMachine] = None,
        config: Optional[BaseConfig] = None,
    ):
        cfg = config or get_config()
        self.tolerance = cfg.quotations.amount_tolerance
        self.default_tax_rate = cfg.quotations.default_tax_rate
        self.allocator = allocator or SequenceAllocator(
            prefix=cfg.quotations.number_prefix,
            max_attempts=cfg.quotations.max_number_attempts,
        )
        self.catalog = catalog or CatalogReader()
        self.resolver = resolver or CustomerResolver()
        self.default_identity = default_identity or DefaultIdentityManager()
        self.status_machine = status_machine or QuotationStatusMachine()

    # =================== WRITES ===================

    def create(self, payload: Mapping[str, Any]) -> QuotationPayload:
        """
        Create a quotation with its items.

        Args:
            payload: Request body with camelCase keys

        Returns:
            The persisted aggregate

        Raises:
            ValidationError: Blank customer name, no items, bad arithmetic,
                inactive business identity
            NotFoundError: Unknown selected customer, product or identity
            SequenceExhaustedError: No free quotation number
            ConflictError: A unique constraint fired on insert
        """
        request = QuotationRequest.from_payload(
            payload, tolerance=self.tolerance, default_tax_rate=self.default_tax_rate
        )

        with atomic("create quotation") as session:
            customer = self.resolver.resolve(session, request.customer, request.resolution)
            identity = self._resolve_identity(session, request)
            number = self.allocator.allocate(session)
            items = self._materialize_items(session, request.items)

            quotations = QuotationRepository(session)
            quotation = Quotation(
                quotation_number=number.value,
                customer_id=customer.id,
                business_identity_id=identity.id if identity is not None else None,
                title=request.title,
                description=request.description,
                notes=request.notes,
                subtotal=request.totals.subtotal,
                tax_rate=request.totals.tax_rate,
                tax_amount=request.totals.tax_amount,
                total_amount=request.totals.total_amount,
                status=QuotationStatus.DRAFT.value,
                valid_until=request.valid_until,
            )
            quotation.items.extend(items)
            quotations.add(quotation)
            result = quotation_to_dict(quotations.get_aggregate(quotation.id))

        logger.info(
            f"Created quotation {result['quotationNumber']} for customer {result['customerId']} "
            f"({len(result['items'])} items, total {result['totalAmount']})"
        )
        return result

    def update(self, quotation_id: str, payload: Mapping[str, Any]) -> QuotationPayload:
        """
        Replace a quotation's fields and its complete item list.

        Business identity is only changed when `businessIdentityId` is
        present in the payload.

        Raises:
            NotFoundError: Unknown quotation, customer, product or identity
            ValidationError: As for create
        """
        request = QuotationRequest.from_payload(
            payload, for_update=True, tolerance=self.tolerance, default_tax_rate=self.default_tax_rate
        )

        with atomic("update quotation") as session:
            quotations = QuotationRepository(session)
            quotation = quotations.get_by_id(quotation_id)
            if quotation is None:
                raise NotFoundError("Quotation", quotation_id)

            customer = self.resolver.resolve(session, request.customer, request.resolution)
            changes = dict(
                customer_id=customer.id,
                title=request.title,
                description=request.description,
                notes=request.notes,
                subtotal=request.totals.subtotal,
                tax_rate=request.totals.tax_rate,
                tax_amount=request.totals.tax_amount,
                total_amount=request.totals.total_amount,
                valid_until=request.valid_until,
            )
            if request.business_identity_given:
                identity = self._resolve_identity(
                    session, request, current_id=quotation.business_identity_id
                )
                changes["business_identity_id"] = identity.id if identity is not None else None

            items = self._materialize_items(session, request.items)
            quotations.update(quotation, **changes)
            quotations.replace_items(quotation, items)
            result = quotation_to_dict(quotations.get_aggregate(quotation.id))

        logger.info(f"Updated quotation {result['quotationNumber']} ({len(result['items'])} items)")
        return result

    def change_status(self, quotation_id: str, status: Any) -> QuotationPayload:
        """Set the status and return the updated aggregate."""
        with atomic("change quotation status") as session:
            quotation = self.status_machine.set_status(session, quotation_id, status)
            result = quotation_to_dict(QuotationRepository(session).get_aggregate(quotation.id))
        return result

    def delete(self, quotation_id: str) -> None:
        """Delete a quotation and, through the cascade, its items."""
        with atomic("delete quotation") as session:
            quotations = QuotationRepository(session)
            quotation = quotations.get_by_id(quotation_id)
            if quotation is None:
                raise NotFoundError("Quotation", quotation_id)
            number = quotation.quotation_number
            quotations.delete(quotation)
        logger.info(f"Deleted quotation {number}")

    # =================== READS ===================

    def get(self, quotation_id: str) -> QuotationPayload:
        with atomic("load quotation") as session:
            quotation = QuotationRepository(session).get_aggregate(quotation_id)
            if quotation is None:
                raise NotFoundError("Quotation", quotation_id)
            return quotation_to_dict(quotation)

    def list(
        self,
        page: Any = 1,
        limit: Any = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_order: str = "desc",
        date_from: Any = None,
        date_to: Any = None,
        min_amount: Any = None,
        max_amount: Any = None,
    ) -> QuotationListPayload:
        """
        Paginated quotation list with summary figures.

        `date_to` given as a bare date covers that whole day. Amount bounds
        apply to totalAmount and are inclusive.

        `summary.statusCounts` ignores the status filter so the caller can
        render every status tab; `summary.totalValue` honours it.

        Raises:
            ValidationError: Unknown status, sort field or order, malformed
                date, or a range whose lower bound exceeds its upper bound
        """
        page, limit = validate_page(page, limit)
        sort_by, sort_order = validate_sort(sort_by, sort_order)
        filters = QuotationFilters(
            statuses=validate_status_filter(status),
            search=(search or "").strip() or None,
            created_from=validate_date_bound(date_from, "dateFrom"),
            created_to=validate_date_bound(date_to, "dateTo", end_of_day=True),
            min_amount=None if min_amount is None else validate_number(min_amount, "minAmount"),
            max_amount=None if max_amount is None else validate_number(max_amount, "maxAmount"),
        )
        validate_range(filters.created_from, filters.created_to, "dateFrom", "dateTo")
        validate_range(filters.min_amount, filters.max_amount, "minAmount", "maxAmount")

        with atomic("list quotations") as session:
            quotations = QuotationRepository(session)
            rows, total = quotations.list_quotations(
                filters,
                page=page,
                limit=limit,
                sort_by=sort_by,
                sort_order=sort_order,
            )
            return {
                "quotations": [quotation_to_dict(q) for q in rows],
                "pagination": pagination_block(page, limit, total),
                "summary": {
                    "statusCounts": quotations.status_counts(filters),
                    "totalValue": quotations.total_value(filters),
                },
            }

    # =================== HELPERS ===================

    def _resolve_identity(
        self,
        session: Session,
        request: QuotationRequest,
        current_id: Optional[str] = None,
    ) -> Optional[BusinessIdentity]:
        """
        Identity named by the request, if any.

        An inactive identity is only accepted when it is the one the
        quotation already carries (`current_id`).
        """
        if request.business_identity_id is None:
            return None

        identity = BusinessIdentityRepository(session).get_by_id(request.business_identity_id)
        if identity is None:
            raise NotFoundError("BusinessIdentity", request.business_identity_id)
        if not identity.is_active and identity.id != current_id:
            raise ValidationError(
                "Business identity is inactive",
                field="businessIdentityId",
                details={"businessIdentityId": identity.id},
            )
        if request.set_as_default_identity:
            self.default_identity.set_default(session, identity.id)
        return identity

    def _materialize_items(self, session: Session, lines: Sequence[LineItem]) -> List[QuotationItem]:
        """Turn validated lines into rows, copying the product unit at quotation time."""
        items = []
        for position, line in enumerate(lines):
            if isinstance(line, CatalogLine):
                product = self.catalog.get_product(session, line.product_id)
                items.append(QuotationItem(
                    position=position,
                    is_custom=False,
                    product_id=product.id,
                    unit=product.unit,
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                ))
            else:
                items.append(QuotationItem(
                    position=position,
                    is_custom=True,
                    custom_name=line.name,
                    custom_description=line.custom_description,
                    unit=line.unit,
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                ))
        return items
