"""Create the database schema without going through Alembic.

Usage: ``python -m blogonspot.init_db``
"""

import logging

from blogonspot.core.logging import setup_logging
from blogonspot.core.settings import settings
from blogonspot.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized at %s", settings.database_url)


if __name__ == "__main__":
    setup_logging(settings.effective_log_level)
    init_db()
