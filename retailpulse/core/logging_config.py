# retailpulse/core/logging_config.py
"""
Logging setup for the API process.

Application loggers follow LOG_LEVEL; the HTTP client, database driver and
scheduler libraries are held at WARNING so request logs stay readable.
"""

import logging
from typing import Optional

from retailpulse.core.config import get_settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "sqlalchemy",
    "sqlalchemy.engine",
    "asyncpg",
    "aiosqlite",
    "apscheduler",
)


def configure_logging(level_name: Optional[str] = None):
    """Configure the root handler and per-library levels. Safe to call more than once."""
    level_name = (level_name or get_settings().LOG_LEVEL or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler()])

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # DB_ECHO turns SQL logging back on
    if get_settings().DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger("retailpulse").setLevel(level)
    logging.getLogger(__name__).info(f"Logging configured at level: {level_name}")
