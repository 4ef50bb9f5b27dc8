from uuid import uuid4
from sqlalchemy import (  # type: ignore
    Column,
    String,
    Text,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship  # type: ignore

from core.db import Base
from shared.constants import DEFAULT_PRODUCT_UNIT
from shared.utilities import utc_now


def _new_id() -> str:
    return str(uuid4())


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    type = Column(String(32), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    products = relationship("Product", back_populates="category")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    specifications = Column(Text, nullable=True)
    unit_price = Column(Float, nullable=False)
    unit = Column(String(32), nullable=False, default=DEFAULT_PRODUCT_UNIT)
    sku = Column(String(64), nullable=True, unique=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    category = relationship("Category", back_populates="products")


__all__ = ["Category", "Product"]
