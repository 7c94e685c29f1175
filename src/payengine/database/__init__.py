"""Store layer for payengine."""

from payengine.database.base import LedgerStore
from payengine.database.memory import InMemoryStore
from payengine.database.sqlalchemy_db import SQLAlchemyStore
from payengine.database.factories import create_store

__all__ = ["LedgerStore", "InMemoryStore", "SQLAlchemyStore", "create_store"]
