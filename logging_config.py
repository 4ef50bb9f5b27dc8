"""
Logging configuration for QuoteDesk.

This module provides a centralized configuration for all loggers in the application.
It allows setting different log levels for the quotation, business identity and
customer components and for SQLAlchemy's statement logging.
"""

import os
import logging
from typing import Dict, List


LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

# Component -> (environment variable, default level, module loggers)
COMPONENT_LOGGERS: Dict[str, tuple] = {
    "quotations": (
        "LOG_LEVEL_QUOTATIONS",
        "INFO",
        [
            "services.application.quotation_writer",
            "services.domain.sequence_allocator",
            "services.domain.status_machine",
        ],
    ),
    "identities": (
        "LOG_LEVEL_IDENTITIES",
        "INFO",
        [
            "services.application.business_identity_service",
            "services.domain.default_identity",
        ],
    ),
    "customers": (
        "LOG_LEVEL_CUSTOMERS",
        "INFO",
        [
            "services.application.customer_service",
            "services.domain.customer_resolver",
        ],
    ),
    # SQL statement logging - WARNING unless explicitly raised
    "sql": ("LOG_LEVEL_SQL", "WARNING", ["sqlalchemy.engine"]),
}


def _configured_logger_names() -> List[str]:
    names = []
    for _, _, loggers in COMPONENT_LOGGERS.values():
        names.extend(loggers)
    return names


def configure_logging():
    """Configure logging for the application."""
    # Get log level from environment variable
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    # Configure root logger
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    # Apply per-component levels; records still propagate to the root handler
    for env_var, default, loggers in COMPONENT_LOGGERS.values():
        level_name = os.getenv(env_var, default).upper()
        level = getattr(logging, level_name, log_level)
        for logger_name in loggers:
            logging.getLogger(logger_name).setLevel(level)


def get_logger_levels() -> Dict[str, str]:
    """Get current log levels for all configured loggers."""
    result = {}

    # Add root logger
    result["root"] = logging.getLevelName(logging.getLogger().level)

    # Add specific loggers
    for logger_name in _configured_logger_names():
        logger = logging.getLogger(logger_name)
        result[logger_name] = logging.getLevelName(logger.getEffectiveLevel())

    return result
