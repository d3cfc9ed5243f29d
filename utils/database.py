"""Database engine helpers"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Recycle pooled connections before MySQL's default wait_timeout closes them
POOL_RECYCLE_SECONDS = 3600


def create_database_engine(config) -> Engine:
    """Create a pooled engine for the WordPress database.

    Nothing connects here; every scrape checks out its own connection and
    runs its queries in a fresh transaction.
    """
    logger.debug(f"Creating database engine for {config.get_dsn_for_logging()}")
    return create_engine(
        config.get_database_url(),
        pool_pre_ping=True,
        pool_recycle=POOL_RECYCLE_SECONDS,
    )
