"""SQLAlchemy models for the payengine ledger store."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from payengine.utils.amount_parser import AMOUNT_PLACES

Base = declarative_base()


class FixedPointAmount(TypeDecorator):
    """Decimal stored exactly as a signed count of ten-thousandths.

    SQLite keeps NUMERIC values as floating point, so amounts go through an
    integer column instead.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value.scaleb(AMOUNT_PLACES))

    def process_result_value(self, value: Optional[int], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value).scaleb(-AMOUNT_PLACES)


class Account(Base):
    """Client account model."""

    __tablename__ = "accounts"

    client_id = Column(Integer, primary_key=True, autoincrement=False)
    available = Column(FixedPointAmount, nullable=False, default=Decimal(0))
    held = Column(FixedPointAmount, nullable=False, default=Decimal(0))
    locked = Column(Boolean, default=False, nullable=False)


class HistoryEntry(Base):
    """Accepted deposit or withdrawal model."""

    __tablename__ = "history_entries"

    tx_id = Column(BigInteger, primary_key=True, autoincrement=False)
    client_id = Column(Integer, ForeignKey("accounts.client_id"), nullable=False)
    kind = Column(String, nullable=False)
    amount = Column(FixedPointAmount, nullable=False)
    dispute_state = Column(String, nullable=False)


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine.

    In-memory SQLite databases exist per connection, so they share one
    connection across threads.
    """
    url = make_url(database_url)
    kwargs = {}
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return create_engine(url, echo=False, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory with the ledger tables in place."""
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
