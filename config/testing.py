"""Testing environment configuration."""

import os
from config.base import BaseConfig, DatabaseConfig


class TestingConfig(BaseConfig):
    """Configuration for testing environment."""

    def _setup_environment(self):
        """Setup testing-specific configuration."""
        # Enable debug mode for tests
        self.debug = True

        # Tests rebind the engine to a per-test SQLite file; this is only
        # the import-time fallback.
        self.database = DatabaseConfig(
            url=os.getenv("TEST_DATABASE_URL", "sqlite://"),
            pool_timeout=10,
        )

        # Permissive CORS for tests
        self.server.allowed_origins = ["*"]

        os.environ.setdefault("LOG_LEVEL", "DEBUG")

    def validate(self):
        """Testing-specific validation (very permissive)."""
        return super().validate()
