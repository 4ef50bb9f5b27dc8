"""
Common type definitions used throughout the application.

This module centralizes the TypedDict shapes of API payloads so that
services, routes and tests agree on the serialized aggregates.
"""

from __future__ import annotations
from typing import TypedDict, Dict, List, Optional


# =================== CATALOG TYPES ===================

class CategoryPayload(TypedDict):
    id: str
    name: str
    type: Optional[str]


class ProductPayload(TypedDict):
    """Catalog product as embedded in quotation items."""
    id: str
    name: str
    description: Optional[str]
    unit: str
    unitPrice: float
    sku: Optional[str]
    isActive: bool
    category: Optional[CategoryPayload]


# =================== PARTY TYPES ===================

class CustomerPayload(TypedDict):
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    gstNumber: Optional[str]
    createdAt: Optional[str]
    updatedAt: Optional[str]


class CustomerListPayload(TypedDict):
    customers: List[CustomerPayload]
    pagination: Dict[str, int]


class BusinessIdentityPayload(TypedDict):
    id: str
    name: str
    description: Optional[str]
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    gstNumber: Optional[str]
    isDefault: bool
    isActive: bool
    createdAt: Optional[str]
    updatedAt: Optional[str]


# =================== QUOTATION TYPES ===================

class QuotationItemPayload(TypedDict):
    """Single line of a quotation; `isCustom` selects which half is populated."""
    id: str
    position: int
    isCustom: bool
    productId: Optional[str]
    product: Optional[ProductPayload]
    customName: Optional[str]
    customUnit: Optional[str]
    customDescription: Optional[str]
    unit: Optional[str]
    description: Optional[str]
    quantity: float
    unitPrice: float
    lineTotal: float


class QuotationPayload(TypedDict):
    """Full quotation aggregate returned by write and read endpoints."""
    id: str
    quotationNumber: str
    customerId: str
    customer: CustomerPayload
    businessIdentityId: Optional[str]
    businessIdentity: Optional[BusinessIdentityPayload]
    title: Optional[str]
    description: Optional[str]
    notes: Optional[str]
    subtotal: float
    taxRate: float
    taxAmount: float
    totalAmount: float
    status: str
    validUntil: Optional[str]
    createdAt: Optional[str]
    updatedAt: Optional[str]
    items: List[QuotationItemPayload]


class QuotationListPayload(TypedDict):
    quotations: List[QuotationPayload]
    pagination: Dict[str, int]
    summary: Dict[str, object]


class IdentityDeletionPayload(TypedDict):
    message: str
    deactivated: bool
    businessIdentity: Optional[BusinessIdentityPayload]
