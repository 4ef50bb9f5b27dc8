from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError  # type: ignore

from config import get_config
from core.db import get_engine, init_db

logger = logging.getLogger(__name__)


def check_config() -> list:
    """Log configuration problems; production refuses to start with any."""
    cfg = get_config()
    problems = cfg.validate()
    for problem in problems:
        logger.warning("configuration: %s", problem)
    if problems and cfg.is_production:
        raise RuntimeError("invalid production configuration: " + "; ".join(problems))
    return problems


def ensure_db_ready() -> bool:
    """Create missing tables. Returns False when the database is unreachable."""
    try:
        init_db()
    except SQLAlchemyError:
        logger.error("database initialisation failed", exc_info=True)
        return False
    logger.info(
        "database ready at %s",
        get_engine().url.render_as_string(hide_password=True),
    )
    return True
