"""Store factory functions for creating ledger store instances."""

import logging
import os
from typing import Optional

from payengine.database.base import LedgerStore
from payengine.database.memory import InMemoryStore
from payengine.database.sqlalchemy_db import SQLAlchemyStore

DATABASE_URL_ENV = "PAYENGINE_DATABASE_URL"

logger = logging.getLogger(__name__)


def create_store(database_url: Optional[str] = None) -> LedgerStore:
    """Create a ledger store.

    Args:
        database_url: SQLAlchemy database URL. If None, checks the
            PAYENGINE_DATABASE_URL environment variable, then falls back to
            an in-memory store.

    Returns:
        LedgerStore instance, not yet initialized
    """
    if database_url is None:
        database_url = os.environ.get(DATABASE_URL_ENV) or None

    if database_url is None:
        logger.debug("Using in-memory ledger store")
        return InMemoryStore()

    logger.debug("Using SQLAlchemy ledger store at %s", database_url)
    return SQLAlchemyStore(database_url)
