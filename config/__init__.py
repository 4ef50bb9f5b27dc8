"""
QuoteDesk settings, read from the environment.

``QUOTEDESK_ENV`` picks the profile (development, testing, production).
Groups on the returned config:

    database    DATABASE_URL, or DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD
    server      QUOTEDESK_API_PREFIX, QUOTEDESK_ALLOWED_ORIGINS
    quotations  QUOTATION_NUMBER_PREFIX, QUOTATION_NUMBER_ATTEMPTS,
                QUOTATION_AMOUNT_TOLERANCE, QUOTATION_DEFAULT_TAX_RATE,
                QUOTATION_CURRENCY
"""

import os

from config.base import BaseConfig
from config.development import DevelopmentConfig
from config.production import ProductionConfig
from config.testing import TestingConfig

_PROFILES = {
    "development": DevelopmentConfig,
    "dev": DevelopmentConfig,
    "testing": TestingConfig,
    "test": TestingConfig,
    "production": ProductionConfig,
    "prod": ProductionConfig,
}


def get_config(environment: str = None) -> BaseConfig:
    """Settings for `environment`, or for QUOTEDESK_ENV; unknown names get development."""
    name = (environment or os.getenv("QUOTEDESK_ENV", "development")).lower()
    return _PROFILES.get(name, DevelopmentConfig)()


__all__ = [
    "BaseConfig",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestingConfig",
    "get_config",
]
