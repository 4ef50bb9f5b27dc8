"""
Default-Identity Invariant Manager.

At most one business identity carries ``is_default``. Every flip runs
inside the caller's unit of work: identities are row-locked, all other
defaults are cleared, then the target is flagged. The partial unique
index on ``is_default`` backs this up at the database level.
"""

from __future__ import annotations
from typing import Optional
import logging

from sqlalchemy.orm import Session

from core.models import BusinessIdentity
from repositories import BusinessIdentityRepository
from shared.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class DefaultIdentityManager:
    """Maintains the single-default business identity invariant."""

    def set_default(self, session: Session, identity_id: str) -> BusinessIdentity:
        """
        Make `identity_id` the one default identity.

        Raises:
            NotFoundError: If the identity does not exist
            ValidationError: If the identity is inactive
        """
        identities = BusinessIdentityRepository(session)
        identities.lock_all()

        target = identities.get_by_id(identity_id)
        if target is None:
            raise NotFoundError("BusinessIdentity", identity_id)
        if not target.is_active:
            raise ValidationError(
                "An inactive business identity cannot be the default",
                field="isDefault",
                details={"businessIdentityId": identity_id},
            )
        if target.is_default:
            return target

        # Clear first: the unique index rejects two flagged rows even mid-transaction
        cleared = identities.clear_defaults(exclude_id=target.id)
        identities.update(target, is_default=True)
        logger.info(f"Default business identity is now {target.id} ({target.name}); cleared {cleared}")
        return target

    def clear_default(self, session: Session, identity: BusinessIdentity) -> BusinessIdentity:
        """Drop the default flag from `identity`, leaving no default."""
        if identity.is_default:
            BusinessIdentityRepository(session).update(identity, is_default=False)
            logger.info(f"Business identity {identity.id} is no longer the default")
        return identity

    def deactivate(self, session: Session, identity: BusinessIdentity) -> BusinessIdentity:
        """Soft-delete `identity`; a default identity loses the flag in the same write."""
        was_default = bool(identity.is_default)
        BusinessIdentityRepository(session).update(identity, is_active=False, is_default=False)
        if was_default:
            logger.info(f"Deactivated default business identity {identity.id}; no default remains")
        return identity

    def current_default(self, session: Session) -> Optional[BusinessIdentity]:
        return BusinessIdentityRepository(session).get_default()
