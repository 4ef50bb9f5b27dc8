from uuid import uuid4
from sqlalchemy import (  # type: ignore
    Column,
    String,
    Text,
    Boolean,
    DateTime,
    Index,
    text,
)
from sqlalchemy.orm import relationship  # type: ignore

from core.db import Base
from shared.utilities import utc_now


def _new_id() -> str:
    return str(uuid4())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(320), nullable=True, index=True)
    phone = Column(String(64), nullable=True)
    address = Column(Text, nullable=True)
    gst_number = Column(String(32), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    quotations = relationship("Quotation", back_populates="customer")


class BusinessIdentity(Base):
    __tablename__ = "business_identities"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(64), nullable=True)
    email = Column(String(320), nullable=True)
    gst_number = Column(String(32), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        # At most one row may carry the default flag
        Index(
            "uq_business_identities_single_default",
            "is_default",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )
    quotations = relationship("Quotation", back_populates="business_identity")


__all__ = ["Customer", "BusinessIdentity"]
