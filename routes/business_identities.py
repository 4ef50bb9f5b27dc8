"""
Business identity routes.
"""

from __future__ import annotations
from typing import Optional
import logging

from fastapi import APIRouter, Query  # type: ignore
from pydantic import BaseModel  # type: ignore

from services.application import BusinessIdentityService

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/business-identities", tags=["business-identities"])


class BusinessIdentityIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gstNumber: Optional[str] = None
    isDefault: Optional[bool] = None
    isActive: Optional[bool] = None


class DefaultIdentityIn(BaseModel):
    id: str


_service = BusinessIdentityService()


@router.get("")
def list_business_identities(
    include_inactive: bool = Query(False, alias="includeInactive"),
) -> list:
    return _service.list(include_inactive=include_inactive)


@router.post("", status_code=201)
def create_business_identity(payload: BusinessIdentityIn) -> dict:
    return _service.create(payload.model_dump(exclude_unset=True))


# Declared before /{identity_id} so "default" is not taken for an id
@router.get("/default")
def get_default_business_identity() -> Optional[dict]:
    return _service.get_default()


@router.put("/default")
def set_default_business_identity(payload: DefaultIdentityIn) -> dict:
    return _service.set_default(payload.id)


@router.get("/{identity_id}")
def get_business_identity(identity_id: str) -> dict:
    return _service.get(identity_id)


@router.put("/{identity_id}")
def update_business_identity(identity_id: str, payload: BusinessIdentityIn) -> dict:
    return _service.update(identity_id, payload.model_dump(exclude_unset=True))


@router.delete("/{identity_id}")
def delete_business_identity(identity_id: str) -> dict:
    return _service.delete(identity_id)
