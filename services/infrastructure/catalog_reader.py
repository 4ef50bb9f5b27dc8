"""
Catalog Reader - read-only lookup of products and categories.

Catalog maintenance lives outside this service; quotations only need to
resolve a product id to its current name, unit and price at write time.
"""

from __future__ import annotations
from typing import Optional
import logging

from sqlalchemy.orm import Session, joinedload

from core.models import Category, Product
from shared.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CatalogReader:
    """Looks up catalog records on the caller's session."""

    def find_product(self, session: Session, product_id: str) -> Optional[Product]:
        return (
            session.query(Product)
            .options(joinedload(Product.category))
            .filter(Product.id == product_id)
            .first()
        )

    def get_product(self, session: Session, product_id: str) -> Product:
        """
        Get a product by id.

        Inactive products are returned as well; existing quotations and
        new lines may still reference them.

        Raises:
            NotFoundError: If no product has this id
        """
        product = self.find_product(session, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        if not product.is_active:
            logger.debug(f"Product {product_id} is inactive but still quotable")
        return product

    def get_category(self, session: Session, category_id: str) -> Category:
        category = session.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category
