"""Development environment configuration."""

import os
from config.base import BaseConfig


class DevelopmentConfig(BaseConfig):
    """Configuration for development environment."""

    def _setup_environment(self):
        """Setup development-specific configuration."""
        # Enable debug mode
        self.debug = True

        # Allow the local frontend dev servers
        if not self.server.allowed_origins or self.server.allowed_origins == ["*"]:
            self.server.allowed_origins = [
                "http://localhost:3000",
                "http://localhost:5173",  # Vite dev server
                "http://127.0.0.1:3000",
                "http://127.0.0.1:5173",
            ]

        # Development logging
        os.environ.setdefault("LOG_LEVEL", "DEBUG")
