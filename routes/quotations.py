"""
Quotation routes.

Thin HTTP layer over ``QuotationWriter``; domain errors propagate to the
application-level exception handlers.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Query  # type: ignore
from pydantic import BaseModel, Field  # type: ignore

from services.application import QuotationWriter
from shared.constants import DEFAULT_PAGE_SIZE, DEFAULT_SORT_FIELD

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/quotations", tags=["quotations"])


class CustomerInfoIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gstNumber: Optional[str] = None


class QuotationItemIn(BaseModel):
    isCustom: bool = False
    productId: Optional[str] = None
    customName: Optional[str] = None
    customUnit: Optional[str] = None
    customDescription: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[float] = None
    unitPrice: Optional[float] = None
    lineTotal: Optional[float] = None


class QuotationRequestIn(BaseModel):
    customerInfo: CustomerInfoIn = Field(default_factory=CustomerInfoIn)
    selectedCustomerId: Optional[str] = None
    saveCustomer: Optional[bool] = None
    businessIdentityId: Optional[str] = None
    setAsDefaultIdentity: bool = False
    items: List[QuotationItemIn] = Field(default_factory=list)
    subtotal: Optional[float] = None
    taxRate: Optional[float] = None
    taxAmount: Optional[float] = None
    totalAmount: Optional[float] = None
    title: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    validUntil: Optional[datetime] = None


class StatusChangeIn(BaseModel):
    status: Any = None


def _writer() -> QuotationWriter:
    return QuotationWriter()


@router.post("", status_code=201)
def create_quotation(payload: QuotationRequestIn) -> dict:
    return _writer().create(payload.model_dump(exclude_unset=True))


@router.get("")
def list_quotations(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    status: Optional[str] = Query(None, description="Status literal, comma list or 'all'"),
    search: Optional[str] = Query(None),
    sort_by: str = Query(DEFAULT_SORT_FIELD, alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="ISO date, inclusive"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="ISO date, inclusive to end of day"),
    min_amount: Optional[float] = Query(None, alias="minAmount"),
    max_amount: Optional[float] = Query(None, alias="maxAmount"),
) -> dict:
    return _writer().list(
        page=page,
        limit=limit,
        status=status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
    )


@router.get("/{quotation_id}")
def get_quotation(quotation_id: str) -> dict:
    return _writer().get(quotation_id)


@router.put("/{quotation_id}")
def update_quotation(quotation_id: str, payload: QuotationRequestIn) -> dict:
    return _writer().update(quotation_id, payload.model_dump(exclude_unset=True))


@router.patch("/{quotation_id}/status")
def change_quotation_status(quotation_id: str, payload: StatusChangeIn) -> dict:
    return _writer().change_status(quotation_id, payload.status)


@router.delete("/{quotation_id}")
def delete_quotation(quotation_id: str) -> dict:
    _writer().delete(quotation_id)
    return {"message": "Quotation deleted successfully"}
