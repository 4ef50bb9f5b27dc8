"""
Base configuration class with all application settings.

This module centralizes configuration logic so that database, quotation
numbering, monetary tolerance and HTTP settings are read from the
environment in exactly one place.
"""

import os
from dataclasses import dataclass, field
from typing import List

from shared.constants import (
    QUOTATION_NUMBER_PREFIX,
    MAX_NUMBER_ATTEMPTS,
    AMOUNT_TOLERANCE,
    DEFAULT_TAX_RATE,
    DEFAULT_CURRENCY,
)


DEFAULT_SQLITE_URL = "sqlite:///./quotedesk.db"


def _get_bool(name: str, default: bool) -> bool:
    """Parse boolean environment variable."""
    val = os.getenv(name)
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    """Parse integer environment variable."""
    try:
        return int(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


def _get_float(name: str, default: float) -> float:
    """Parse float environment variable."""
    try:
        return float(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


def _get_list(name: str, default: List[str] = None, separator: str = ",") -> List[str]:
    """Parse comma-separated list environment variable."""
    if default is None:
        default = []

    val = os.getenv(name, "")
    if not val.strip():
        return default

    return [item.strip() for item in val.split(separator) if item.strip()]


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    url: str = ""
    host: str = ""
    port: int = 5432
    name: str = "quotedesk"
    user: str = "postgres"
    password: str = ""
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            url=os.getenv("DATABASE_URL", ""),
            host=os.getenv("DB_HOST", ""),
            port=_get_int("DB_PORT", 5432),
            name=os.getenv("DB_NAME", "quotedesk"),
            user=os.getenv("DB_USER", "postgres"),
            password=os.getenv("DB_PASSWORD", ""),
            echo=_get_bool("DB_ECHO", False),
            pool_size=_get_int("DB_POOL_SIZE", 10),
            max_overflow=_get_int("DB_MAX_OVERFLOW", 20),
            pool_timeout=_get_int("DB_POOL_TIMEOUT", 30),
            pool_recycle=_get_int("DB_POOL_RECYCLE", 1800),
        )

    @property
    def effective_url(self) -> str:
        """DATABASE_URL if set, else a Postgres URL from DB_* parts, else local SQLite."""
        if self.url:
            return self.url
        if self.host:
            auth = self.user if not self.password else f"{self.user}:{self.password}"
            return f"postgresql+psycopg2://{auth}@{self.host}:{self.port}/{self.name}"
        return DEFAULT_SQLITE_URL

    @property
    def is_sqlite(self) -> bool:
        return self.effective_url.startswith("sqlite")


@dataclass
class QuotationConfig:
    """Quotation numbering and monetary validation settings."""
    number_prefix: str = QUOTATION_NUMBER_PREFIX
    max_number_attempts: int = MAX_NUMBER_ATTEMPTS
    amount_tolerance: float = AMOUNT_TOLERANCE
    default_tax_rate: float = DEFAULT_TAX_RATE
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls) -> 'QuotationConfig':
        return cls(
            number_prefix=os.getenv("QUOTATION_NUMBER_PREFIX", QUOTATION_NUMBER_PREFIX).strip().upper(),
            max_number_attempts=_get_int("QUOTATION_NUMBER_ATTEMPTS", MAX_NUMBER_ATTEMPTS),
            amount_tolerance=_get_float("QUOTATION_AMOUNT_TOLERANCE", AMOUNT_TOLERANCE),
            default_tax_rate=_get_float("QUOTATION_DEFAULT_TAX_RATE", DEFAULT_TAX_RATE),
            currency=os.getenv("QUOTATION_CURRENCY", DEFAULT_CURRENCY).strip().upper(),
        )


@dataclass
class ServerConfig:
    """HTTP server settings."""
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    api_prefix: str = "/api"

    @classmethod
    def from_env(cls) -> 'ServerConfig':
        return cls(
            allowed_origins=_get_list("QUOTEDESK_ALLOWED_ORIGINS", ["*"]),
            api_prefix=os.getenv("QUOTEDESK_API_PREFIX", "/api").rstrip("/") or "/api",
        )


class BaseConfig:
    """
    Base configuration class that consolidates all application settings.

    Subclasses tweak the groups for their environment in
    `_setup_environment`.
    """

    def __init__(self):
        # Core app configuration
        self.app_name: str = "QuoteDesk"
        self.app_version: str = "1.0.0"
        self.debug: bool = _get_bool("DEBUG", False)
        self.environment: str = os.getenv("QUOTEDESK_ENV", "development")

        # Configuration groups
        self.database = DatabaseConfig.from_env()
        self.quotations = QuotationConfig.from_env()
        self.server = ServerConfig.from_env()

        # Initialize environment-specific settings
        self._setup_environment()

    def _setup_environment(self):
        """Setup environment-specific configuration. Override in subclasses."""
        pass

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() in ("testing", "test")

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.quotations.max_number_attempts < 1:
            errors.append("QUOTATION_NUMBER_ATTEMPTS must be at least 1")

        if self.quotations.amount_tolerance <= 0:
            errors.append("QUOTATION_AMOUNT_TOLERANCE must be positive")

        if not self.quotations.number_prefix.isalpha():
            errors.append("QUOTATION_NUMBER_PREFIX must contain letters only")

        return errors
