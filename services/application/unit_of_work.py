"""
Atomic unit of work for application services.

Wraps ``core.db.session_scope`` and turns database integrity violations
(unique number, unique name, single default) into ``ConflictError`` after
the transaction has been rolled back.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import session_scope
from shared.exceptions import ConflictError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(action: str) -> Iterator[Session]:
    """
    Run a block as one all-or-nothing transaction.

    Args:
        action: Short description used in log lines and conflict messages

    Raises:
        ConflictError: If the database rejected a write on a constraint
    """
    try:
        with session_scope() as session:
            yield session
    except IntegrityError as e:
        logger.info(f"Integrity violation during {action}: {e.orig}")
        raise ConflictError(
            f"Conflicting data while trying to {action}",
            details={"reason": str(e.orig)},
            original_exception=e,
        )
