"""
Serialization of ORM rows into camelCase API payloads.

Called inside the unit of work, while relationships can still load.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from core.models import BusinessIdentity, Category, Customer, Product, Quotation, QuotationItem
from shared.types import (
    BusinessIdentityPayload,
    CategoryPayload,
    CustomerPayload,
    ProductPayload,
    QuotationItemPayload,
    QuotationPayload,
)
from shared.utilities import isoformat_or_none


def category_to_dict(category: Optional[Category]) -> Optional[CategoryPayload]:
    if category is None:
        return None
    return {"id": category.id, "name": category.name, "type": category.type}


def product_to_dict(product: Optional[Product]) -> Optional[ProductPayload]:
    if product is None:
        return None
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "unit": product.unit,
        "unitPrice": product.unit_price,
        "sku": product.sku,
        "isActive": bool(product.is_active),
        "category": category_to_dict(product.category),
    }


def customer_to_dict(customer: Customer) -> CustomerPayload:
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "gstNumber": customer.gst_number,
        "createdAt": isoformat_or_none(customer.created_at),
        "updatedAt": isoformat_or_none(customer.updated_at),
    }


def business_identity_to_dict(identity: Optional[BusinessIdentity]) -> Optional[BusinessIdentityPayload]:
    if identity is None:
        return None
    return {
        "id": identity.id,
        "name": identity.name,
        "description": identity.description,
        "address": identity.address,
        "phone": identity.phone,
        "email": identity.email,
        "gstNumber": identity.gst_number,
        "isDefault": bool(identity.is_default),
        "isActive": bool(identity.is_active),
        "createdAt": isoformat_or_none(identity.created_at),
        "updatedAt": isoformat_or_none(identity.updated_at),
    }


def item_to_dict(item: QuotationItem) -> QuotationItemPayload:
    return {
        "id": item.id,
        "position": item.position,
        "isCustom": bool(item.is_custom),
        "productId": item.product_id,
        "product": product_to_dict(item.product),
        "customName": item.custom_name,
        "customUnit": item.unit if item.is_custom else None,
        "customDescription": item.custom_description,
        "unit": item.unit,
        "description": item.description,
        "quantity": item.quantity,
        "unitPrice": item.unit_price,
        "lineTotal": item.line_total,
    }


def quotation_to_dict(quotation: Quotation) -> QuotationPayload:
    return {
        "id": quotation.id,
        "quotationNumber": quotation.quotation_number,
        "customerId": quotation.customer_id,
        "customer": customer_to_dict(quotation.customer),
        "businessIdentityId": quotation.business_identity_id,
        "businessIdentity": business_identity_to_dict(quotation.business_identity),
        "title": quotation.title,
        "description": quotation.description,
        "notes": quotation.notes,
        "subtotal": quotation.subtotal,
        "taxRate": quotation.tax_rate,
        "taxAmount": quotation.tax_amount,
        "totalAmount": quotation.total_amount,
        "status": quotation.status,
        "validUntil": isoformat_or_none(quotation.valid_until),
        "createdAt": isoformat_or_none(quotation.created_at),
        "updatedAt": isoformat_or_none(quotation.updated_at),
        "items": [item_to_dict(item) for item in quotation.items],
    }


def quotation_summary_to_dict(quotation: Quotation) -> Dict[str, Any]:
    """Short form used in a customer's recent-quotation list."""
    return {
        "id": quotation.id,
        "quotationNumber": quotation.quotation_number,
        "title": quotation.title,
        "totalAmount": quotation.total_amount,
        "status": quotation.status,
        "createdAt": isoformat_or_none(quotation.created_at),
    }
