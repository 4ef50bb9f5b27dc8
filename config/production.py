"""Production environment configuration."""

import os
from config.base import BaseConfig


class ProductionConfig(BaseConfig):
    """Configuration for production environment."""

    def _setup_environment(self):
        """Setup production-specific configuration."""
        # Disable debug mode
        self.debug = False

        # Strict CORS in production
        allowed_origins = os.getenv("QUOTEDESK_ALLOWED_ORIGINS", "").strip()
        if allowed_origins:
            self.server.allowed_origins = [
                origin.strip() for origin in allowed_origins.split(",")
                if origin.strip()
            ]
        else:
            self.server.allowed_origins = []

        # Production logging
        os.environ.setdefault("LOG_LEVEL", "INFO")

    def validate(self):
        """Production-specific validation (strict)."""
        errors = super().validate()

        if self.database.is_sqlite:
            errors.append("A PostgreSQL DATABASE_URL (or DB_HOST) is required in production")

        if "*" in (self.server.allowed_origins or []):
            errors.append("Wildcard CORS origins are not allowed in production")

        return errors
