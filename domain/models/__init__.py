"""
Domain models - Pure business entities without infrastructure dependencies.

These models represent quotation requests, line items and customer
resolution rules independent of database schemas or HTTP specifics.
"""

from domain.models.customer import (
    CustomerInfo,
    UseExisting,
    CreateOrMergeByIdentity,
    AlwaysCreateNew,
    ResolutionMode,
    resolution_mode_for,
)
from domain.models.quotation import (
    QuotationStatus,
    CatalogLine,
    CustomLine,
    LineItem,
    QuotationRequest,
    line_item_from_payload,
)

__all__ = [
    "CustomerInfo",
    "UseExisting",
    "CreateOrMergeByIdentity",
    "AlwaysCreateNew",
    "ResolutionMode",
    "resolution_mode_for",
    "QuotationStatus",
    "CatalogLine",
    "CustomLine",
    "LineItem",
    "QuotationRequest",
    "line_item_from_payload",
]
