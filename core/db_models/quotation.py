from uuid import uuid4
from sqlalchemy import (  # type: ignore
    Column,
    Integer,
    String,
    Text,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship  # type: ignore

from core.db import Base
from shared.constants import QUOTATION_STATUSES, STATUS_DRAFT
from shared.utilities import utc_now


def _new_id() -> str:
    return str(uuid4())


_STATUS_LIST = ", ".join(f"'{s}'" for s in QUOTATION_STATUSES)


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(String(36), primary_key=True, default=_new_id)
    quotation_number = Column(String(32), nullable=False, unique=True, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    business_identity_id = Column(
        String(36), ForeignKey("business_identities.id"), nullable=True, index=True
    )
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    subtotal = Column(Float, nullable=False, default=0.0)
    tax_rate = Column(Float, nullable=False)
    tax_amount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(16), nullable=False, default=STATUS_DRAFT, index=True)
    valid_until = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_LIST})", name="ck_quotations_status"),
    )
    customer = relationship("Customer", back_populates="quotations")
    business_identity = relationship("BusinessIdentity", back_populates="quotations")
    items = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.position",
    )


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    quotation_id = Column(
        String(36), ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    is_custom = Column(Boolean, nullable=False, default=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=True, index=True)
    custom_name = Column(String(255), nullable=True)
    custom_description = Column(Text, nullable=True)
    # Unit at time of quotation: copied from the product, or the custom unit
    unit = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    line_total = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        CheckConstraint(
            "(is_custom AND product_id IS NULL AND custom_name IS NOT NULL)"
            " OR (NOT is_custom AND product_id IS NOT NULL AND custom_name IS NULL)",
            name="ck_quotation_items_kind",
        ),
    )
    quotation = relationship("Quotation", back_populates="items")
    product = relationship("Product")


__all__ = ["Quotation", "QuotationItem"]
