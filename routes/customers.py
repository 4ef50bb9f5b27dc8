"""
Customer routes.
"""

from __future__ import annotations
from typing import Optional
import logging

from fastapi import APIRouter, Query  # type: ignore
from pydantic import BaseModel  # type: ignore

from services.application import CustomerService
from shared.constants import DEFAULT_CUSTOMER_PAGE_SIZE

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


class CustomerIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gstNumber: Optional[str] = None


_service = CustomerService()


@router.post("", status_code=201)
def create_customer(payload: CustomerIn) -> dict:
    return _service.create(payload.model_dump())


@router.get("")
def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_CUSTOMER_PAGE_SIZE, ge=1),
    search: Optional[str] = Query(None),
) -> dict:
    return _service.list(page=page, limit=limit, search=search)


@router.get("/{customer_id}")
def get_customer(customer_id: str) -> dict:
    return _service.get(customer_id)


@router.put("/{customer_id}")
def update_customer(customer_id: str, payload: CustomerIn) -> dict:
    return _service.update(customer_id, payload.model_dump())


@router.delete("/{customer_id}")
def delete_customer(customer_id: str) -> dict:
    _service.delete(customer_id)
    return {"message": "Customer deleted successfully"}
