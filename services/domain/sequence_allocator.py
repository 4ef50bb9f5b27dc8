"""
Sequence Allocator - quotation number generation.

Numbers are ``<prefix>-<YYYYMMDD>-<NNN>`` with a random three digit
suffix. Uniqueness is checked against the store inside the caller's
transaction; the insert that follows happens in that same transaction,
so no other writer can take the number in between.
"""

from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional
import logging
import random

from sqlalchemy.orm import Session

from core.db import acquire_advisory_lock
from domain.value_objects.quotation_number import QuotationNumber
from repositories import QuotationRepository
from shared.constants import (
    QUOTATION_NUMBER_PREFIX,
    QUOTATION_NUMBER_DATE_FORMAT,
    QUOTATION_NUMBER_SUFFIX_DIGITS,
    MAX_NUMBER_ATTEMPTS,
)
from shared.exceptions import SequenceExhaustedError

logger = logging.getLogger(__name__)


class SequenceAllocator:
    """Bounded optimistic allocation of quotation numbers."""

    def __init__(
        self,
        prefix: str = QUOTATION_NUMBER_PREFIX,
        max_attempts: int = MAX_NUMBER_ATTEMPTS,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ):
        self.prefix = prefix
        self.max_attempts = max_attempts
        self.clock = clock
        self.rng = rng or random.Random()

    def candidate(self) -> QuotationNumber:
        """Fresh candidate for today's (server local) date."""
        suffix = self.rng.randrange(10 ** QUOTATION_NUMBER_SUFFIX_DIGITS)
        return QuotationNumber.from_parts(self.clock().date(), suffix, self.prefix)

    def allocate(self, session: Session) -> QuotationNumber:
        """
        Return a quotation number not yet used in the store.

        Must run inside the unit of work that inserts the quotation.

        Args:
            session: Session of the enclosing unit of work

        Returns:
            An unused QuotationNumber

        Raises:
            SequenceExhaustedError: If every attempt collided
        """
        issued_on = self.clock().date().strftime(QUOTATION_NUMBER_DATE_FORMAT)
        acquire_advisory_lock(session, f"quotation-number:{self.prefix}-{issued_on}")

        quotations = QuotationRepository(session)
        last: Optional[QuotationNumber] = None
        for attempt in range(1, self.max_attempts + 1):
            last = self.candidate()
            if not quotations.number_exists(last.value):
                return last
            logger.debug(f"Quotation number collision on {last} (attempt {attempt}/{self.max_attempts})")

        logger.error(
            f"Quotation number space exhausted after {self.max_attempts} attempts "
            f"(last candidate {last}); this is unusual"
        )
        raise SequenceExhaustedError(self.max_attempts, last.value if last else None)
