"""
Infrastructure Services - collaborators outside the quotation core.

This module contains read-only access to the product catalog.
"""

from services.infrastructure.catalog_reader import CatalogReader

__all__ = [
    "CatalogReader",
]
