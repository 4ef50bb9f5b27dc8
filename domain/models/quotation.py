"""
Quotation domain models.

Line items are a tagged variant: a ``CatalogLine`` points at a catalog
product, a ``CustomLine`` carries its own name, unit and description.
``QuotationRequest`` is the validated form of a create/update request.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union

from domain.models.customer import CustomerInfo, ResolutionMode, resolution_mode_for
from domain.value_objects.totals import QuotationTotals
from shared.constants import AMOUNT_TOLERANCE, DEFAULT_TAX_RATE
from shared.exceptions import ValidationError
from shared.utilities import amounts_match, to_naive_utc
from shared.validators import optional_text, validate_positive, validate_non_negative, validate_status_literal


class QuotationStatus(str, Enum):
    """Closed set of quotation lifecycle states."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"

    @classmethod
    def parse(cls, literal: Any) -> QuotationStatus:
        """Exact-match parse; unknown literals raise ValidationError."""
        return cls(validate_status_literal(literal))


@dataclass(frozen=True)
class CatalogLine:
    """Line referencing a catalog product; price is frozen on the line."""
    product_id: str
    quantity: float
    unit_price: float
    line_total: float
    description: Optional[str] = None

    is_custom = False


@dataclass(frozen=True)
class CustomLine:
    """Ad-hoc line with no catalog reference."""
    name: str
    quantity: float
    unit_price: float
    line_total: float
    unit: Optional[str] = None
    custom_description: Optional[str] = None
    description: Optional[str] = None

    is_custom = True


LineItem = Union[CatalogLine, CustomLine]


def line_item_from_payload(
    payload: Mapping[str, Any],
    index: int,
    tolerance: float = AMOUNT_TOLERANCE,
) -> LineItem:
    """
    Build a validated line item from its request shape.

    Args:
        payload: One element of the request's ``items`` list
        index: Position in the list, used in error context
        tolerance: Allowed absolute error for lineTotal = quantity * unitPrice

    Raises:
        ValidationError: On a missing discriminator payload, non-positive
            quantity/price or an unbalanced line total
    """
    prefix = f"items[{index}]"
    quantity = validate_positive(payload.get("quantity"), f"{prefix}.quantity")
    unit_price = validate_positive(payload.get("unitPrice"), f"{prefix}.unitPrice")
    line_total = validate_non_negative(payload.get("lineTotal"), f"{prefix}.lineTotal")

    if not amounts_match(line_total, quantity * unit_price, tolerance):
        raise ValidationError(
            f"{prefix}.lineTotal does not equal quantity * unitPrice",
            field=f"{prefix}.lineTotal",
            details={"expected": round(quantity * unit_price, 4), "received": line_total},
        )

    description = optional_text(payload.get("description"))
    product_id = optional_text(payload.get("productId"))
    custom_name = optional_text(payload.get("customName"))

    if bool(payload.get("isCustom")):
        if product_id is not None:
            raise ValidationError(
                f"{prefix} is custom and cannot reference a product", field=f"{prefix}.productId"
            )
        if custom_name is None:
            raise ValidationError(f"{prefix}.customName is required", field=f"{prefix}.customName")
        return CustomLine(
            name=custom_name,
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total,
            unit=optional_text(payload.get("customUnit")),
            custom_description=optional_text(payload.get("customDescription")),
            description=description,
        )

    if product_id is None:
        raise ValidationError(f"{prefix}.productId is required", field=f"{prefix}.productId")
    if custom_name is not None:
        raise ValidationError(
            f"{prefix} references a product and cannot carry a custom name",
            field=f"{prefix}.customName",
        )
    return CatalogLine(
        product_id=product_id,
        quantity=quantity,
        unit_price=unit_price,
        line_total=line_total,
        description=description,
    )


@dataclass(frozen=True)
class QuotationRequest:
    """Validated create/update request."""
    customer: CustomerInfo
    resolution: ResolutionMode
    items: List[LineItem]
    totals: QuotationTotals
    title: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    valid_until: Optional[datetime] = None
    business_identity_id: Optional[str] = None
    business_identity_given: bool = False
    set_as_default_identity: bool = False

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        for_update: bool = False,
        tolerance: float = AMOUNT_TOLERANCE,
        default_tax_rate: float = DEFAULT_TAX_RATE,
    ) -> QuotationRequest:
        """
        Validate a request body (camelCase keys, unset keys absent).

        The customer name and a non-empty item list are checked first so
        that the cheapest rejection wins.
        """
        customer = CustomerInfo.from_payload(payload.get("customerInfo") or {})
        customer.require_name()

        raw_items: Sequence[Mapping[str, Any]] = payload.get("items") or []
        if not raw_items:
            raise ValidationError("At least one item is required", field="items")

        items = [line_item_from_payload(item, i, tolerance) for i, item in enumerate(raw_items)]
        totals = (
            QuotationTotals.from_payload(payload, default_tax_rate)
            .validate(tolerance)
            .validate_lines((item.line_total for item in items), tolerance)
        )

        business_identity_id = optional_text(payload.get("businessIdentityId"))
        set_as_default = bool(payload.get("setAsDefaultIdentity"))
        if set_as_default and business_identity_id is None:
            raise ValidationError(
                "setAsDefaultIdentity requires a businessIdentityId",
                field="setAsDefaultIdentity",
            )

        save_customer = payload.get("saveCustomer")
        if save_customer is None:
            # Editing reuses the stored customer by identity
            save_customer = for_update

        return cls(
            customer=customer,
            resolution=resolution_mode_for(payload.get("selectedCustomerId"), bool(save_customer)),
            items=items,
            totals=totals,
            title=optional_text(payload.get("title")),
            description=optional_text(payload.get("description")),
            notes=optional_text(payload.get("notes")),
            valid_until=to_naive_utc(payload.get("validUntil")),
            business_identity_id=business_identity_id,
            business_identity_given="businessIdentityId" in payload,
            set_as_default_identity=set_as_default,
        )
