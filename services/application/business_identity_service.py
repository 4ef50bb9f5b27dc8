"""
Business Identity Service - maintenance of seller profiles.

All default flag changes go through ``DefaultIdentityManager`` so the
single-default invariant holds across create, update and delete.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional
import logging

from core.models import BusinessIdentity
from repositories import BusinessIdentityRepository
from services.application.serializers import business_identity_to_dict
from services.application.unit_of_work import atomic
from services.domain import DefaultIdentityManager
from shared.exceptions import ConflictError, NotFoundError
from shared.types import BusinessIdentityPayload, IdentityDeletionPayload
from shared.validators import optional_text, validate_required_text

logger = logging.getLogger(__name__)

# Request key -> column for the optional contact fields
_CONTACT_FIELDS = {
    "description": "description",
    "address": "address",
    "phone": "phone",
    "email": "email",
    "gstNumber": "gst_number",
}


class BusinessIdentityService:
    """Application service for business identities."""

    def __init__(self, default_identity: Optional[DefaultIdentityManager] = None):
        self.default_identity = default_identity or DefaultIdentityManager()

    def list(self, include_inactive: bool = False) -> List[BusinessIdentityPayload]:
        with atomic("list business identities") as session:
            rows = BusinessIdentityRepository(session).list_identities(include_inactive)
            return [business_identity_to_dict(row) for row in rows]

    def get(self, identity_id: str) -> BusinessIdentityPayload:
        with atomic("load business identity") as session:
            return business_identity_to_dict(self._require(session, identity_id))

    def get_default(self) -> Optional[BusinessIdentityPayload]:
        with atomic("load default business identity") as session:
            return business_identity_to_dict(self.default_identity.current_default(session))

    def create(self, payload: Mapping[str, Any]) -> BusinessIdentityPayload:
        """
        Create an identity; `isDefault` makes it the one default.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name is taken
        """
        name = validate_required_text(payload.get("name"), "name", "Business name")

        with atomic("create business identity") as session:
            identities = BusinessIdentityRepository(session)
            if identities.get_by_name(name) is not None:
                raise ConflictError("Business name already exists", details={"name": name})

            values: Dict[str, Any] = {
                column: optional_text(payload.get(key)) for key, column in _CONTACT_FIELDS.items()
            }
            identity = identities.create(name=name, is_default=False, is_active=True, **values)
            if payload.get("isDefault"):
                self.default_identity.set_default(session, identity.id)
            result = business_identity_to_dict(identity)

        logger.info(f"Created business identity {result['id']} ({name})")
        return result

    def update(self, identity_id: str, payload: Mapping[str, Any]) -> BusinessIdentityPayload:
        """
        Update an identity.

        Contact fields absent from `payload` keep their value. `isActive`
        false on the default identity clears the default flag; `isDefault`
        true routes through the default manager, false clears it.

        Raises:
            NotFoundError: Unknown identity
            ValidationError: Blank name, or making an inactive identity default
            ConflictError: Name held by another identity
        """
        with atomic("update business identity") as session:
            identities = BusinessIdentityRepository(session)
            identity = self._require(session, identity_id)

            name = validate_required_text(payload.get("name", identity.name), "name", "Business name")
            if name != identity.name and identities.get_by_name(name, exclude_id=identity.id) is not None:
                raise ConflictError("Business name already exists", details={"name": name})

            changes: Dict[str, Any] = {"name": name}
            for key, column in _CONTACT_FIELDS.items():
                if key in payload:
                    changes[column] = optional_text(payload.get(key))
            identities.update(identity, **changes)

            is_active = payload.get("isActive")
            if is_active is False:
                self.default_identity.deactivate(session, identity)
            elif is_active is True and not identity.is_active:
                identities.update(identity, is_active=True)

            is_default = payload.get("isDefault")
            if is_default is True:
                self.default_identity.set_default(session, identity.id)
            elif is_default is False:
                self.default_identity.clear_default(session, identity)

            result = business_identity_to_dict(identity)

        logger.info(f"Updated business identity {identity_id}")
        return result

    def delete(self, identity_id: str) -> IdentityDeletionPayload:
        """
        Hard-delete an unused identity, or deactivate one that quotations use.

        A deactivated default identity loses the default flag in the same write.
        """
        with atomic("delete business identity") as session:
            identities = BusinessIdentityRepository(session)
            identity = self._require(session, identity_id)

            usage = identities.count_quotations(identity.id)
            if usage > 0:
                self.default_identity.deactivate(session, identity)
                logger.info(f"Deactivated business identity {identity_id} used by {usage} quotations")
                return {
                    "message": "Business name deactivated (used in existing quotations)",
                    "deactivated": True,
                    "businessIdentity": business_identity_to_dict(identity),
                }

            identities.delete(identity)

        logger.info(f"Deleted business identity {identity_id}")
        return {
            "message": "Business name deleted successfully",
            "deactivated": False,
            "businessIdentity": None,
        }

    def set_default(self, identity_id: str) -> BusinessIdentityPayload:
        """Make `identity_id` the default identity."""
        with atomic("set default business identity") as session:
            identity = self.default_identity.set_default(session, identity_id)
            return business_identity_to_dict(identity)

    def _require(self, session, identity_id: str) -> BusinessIdentity:
        identity = BusinessIdentityRepository(session).get_by_id(identity_id)
        if identity is None:
            raise NotFoundError("BusinessIdentity", identity_id)
        return identity
