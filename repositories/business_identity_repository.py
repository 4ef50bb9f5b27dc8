"""
Business Identity Repository for the seller profiles printed on quotations.
"""

from __future__ import annotations
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from core.models import BusinessIdentity, Quotation
import logging

logger = logging.getLogger(__name__)


class BusinessIdentityRepository(BaseRepository[BusinessIdentity]):
    """Repository for BusinessIdentity operations."""

    def __init__(self, session: Session):
        super().__init__(BusinessIdentity, session)

    def get_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[BusinessIdentity]:
        """Get identity by its unique name."""
        def query_func(session: Session) -> Optional[BusinessIdentity]:
            query = session.query(BusinessIdentity).filter(BusinessIdentity.name == name)
            if exclude_id is not None:
                query = query.filter(BusinessIdentity.id != exclude_id)
            return query.first()

        return self.execute_query(query_func)

    def get_default(self) -> Optional[BusinessIdentity]:
        """The identity currently flagged as default, if any."""
        def query_func(session: Session) -> Optional[BusinessIdentity]:
            return (
                session.query(BusinessIdentity)
                .filter(BusinessIdentity.is_default.is_(True))
                .first()
            )

        return self.execute_query(query_func)

    def list_identities(self, include_inactive: bool = False) -> List[BusinessIdentity]:
        """Default first, then by name."""
        def query_func(session: Session) -> List[BusinessIdentity]:
            query = session.query(BusinessIdentity)
            if not include_inactive:
                query = query.filter(BusinessIdentity.is_active.is_(True))
            return query.order_by(
                BusinessIdentity.is_default.desc(), BusinessIdentity.name.asc()
            ).all()

        return self.execute_query(query_func) or []

    def lock_all(self) -> List[BusinessIdentity]:
        """
        Row-lock every identity in id order.

        Concurrent default flips queue behind the first holder instead of
        interleaving their clear and set steps.
        """
        def query_func(session: Session) -> List[BusinessIdentity]:
            return (
                session.query(BusinessIdentity)
                .order_by(BusinessIdentity.id.asc())
                .with_for_update()
                .all()
            )

        return self.execute_query(query_func)

    def clear_defaults(self, exclude_id: Optional[str] = None) -> int:
        """Unset the default flag on every identity except `exclude_id`."""
        def query_func(session: Session) -> int:
            stmt = update(BusinessIdentity).where(BusinessIdentity.is_default.is_(True))
            if exclude_id is not None:
                stmt = stmt.where(BusinessIdentity.id != exclude_id)
            result = session.execute(
                stmt.values(is_default=False).execution_options(synchronize_session="fetch")
            )
            return result.rowcount or 0

        return self.execute_query(query_func)

    def count_quotations(self, identity_id: str) -> int:
        """Number of quotations printed under the identity."""
        def query_func(session: Session) -> int:
            return (
                session.query(Quotation)
                .filter(Quotation.business_identity_id == identity_id)
                .count()
            )

        return self.execute_query(query_func) or 0
