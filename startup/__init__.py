"""Startup orchestration package.

Provides small, testable units for app initialization:
- db_init: configuration check and table creation
"""

import logging

logger = logging.getLogger(__name__)


def run_startup_tasks() -> bool:
    """Run all startup tasks; returns whether the database is ready."""
    # Lazy import to avoid import-time graph issues
    from startup.db_init import check_config, ensure_db_ready

    check_config()
    db_ready = ensure_db_ready()
    if not db_ready:
        logger.error("Database not ready - API calls will fail until it is reachable")
    return db_ready
