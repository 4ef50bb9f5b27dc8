"""
Customer domain model.

``CustomerInfo`` is the normalised contact data carried on a quotation
request. The resolution modes say how that data maps onto a stored
customer row.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from shared.validators import optional_text, validate_required_text


@dataclass(frozen=True)
class CustomerInfo:
    """Customer contact details; blanks are already normalised to None."""

    name: Optional[str]
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CustomerInfo:
        return cls(
            name=optional_text(payload.get("name")),
            email=optional_text(payload.get("email")),
            phone=optional_text(payload.get("phone")),
            address=optional_text(payload.get("address")),
            gst_number=optional_text(payload.get("gstNumber")),
        )

    def require_name(self) -> str:
        return validate_required_text(self.name, "customerInfo.name", "Customer name")

    def non_empty_fields(self) -> Dict[str, str]:
        """Column -> value for every populated field (merge input)."""
        values = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "gst_number": self.gst_number,
        }
        return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class UseExisting:
    """Reference a customer the caller already selected."""
    customer_id: str


@dataclass(frozen=True)
class CreateOrMergeByIdentity:
    """Reuse the customer with the same (name, email), else create one."""


@dataclass(frozen=True)
class AlwaysCreateNew:
    """Insert a fresh customer row even if an identical one exists."""


ResolutionMode = Union[UseExisting, CreateOrMergeByIdentity, AlwaysCreateNew]


def resolution_mode_for(selected_customer_id: Any, save_customer: bool) -> ResolutionMode:
    """Map the request's selectedCustomerId / saveCustomer pair to a mode."""
    selected = optional_text(selected_customer_id)
    if selected is not None:
        return UseExisting(selected)
    if save_customer:
        return CreateOrMergeByIdentity()
    return AlwaysCreateNew()
