"""
Quotation Status Machine.

Any of the five statuses may be set from any other by an explicit
operator action. Nothing transitions on time; an expired ``valid_until``
does not change the status by itself.
"""

from __future__ import annotations
from typing import Any
import logging

from sqlalchemy.orm import Session

from core.models import Quotation
from domain.models.quotation import QuotationStatus
from repositories import QuotationRepository
from shared.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class QuotationStatusMachine:
    """Applies explicit status changes to persisted quotations."""

    def set_status(self, session: Session, quotation_id: str, literal: Any) -> Quotation:
        """
        Set the status of a persisted quotation.

        The literal is validated before the quotation is even loaded.

        Raises:
            ValidationError: If `literal` is not one of the five statuses
            NotFoundError: If the quotation does not exist
        """
        target = QuotationStatus.parse(literal)

        quotations = QuotationRepository(session)
        quotation = quotations.get_by_id(quotation_id)
        if quotation is None:
            raise NotFoundError("Quotation", quotation_id)

        current = QuotationStatus(quotation.status)
        if current is target:
            return quotation

        quotations.update(quotation, status=target.value)
        logger.info(
            f"Quotation {quotation.quotation_number} status {current.value} -> {target.value}"
        )
        return quotation
