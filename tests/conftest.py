"""Shared pytest fixtures for payengine tests."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from payengine.database.memory import InMemoryStore
from payengine.database.sqlalchemy_db import SQLAlchemyStore
from payengine.domain.entities import TransactionKind, TransactionRecord
from payengine.domain.ledger import LedgerEngine, ProcessingSummary


@pytest.fixture(params=["memory", "sqlalchemy"])
def store(request):
    """Create an empty ledger store of each implementation."""
    if request.param == "memory":
        store = InMemoryStore()
    else:
        store = SQLAlchemyStore("sqlite://")
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def engine(store):
    """Create a LedgerEngine over an empty store."""
    return LedgerEngine(store)


@pytest.fixture
def summary():
    """Create an empty processing summary."""
    return ProcessingSummary()


def deposit(client_id: int, tx_id: int, amount: str) -> TransactionRecord:
    return TransactionRecord(TransactionKind.DEPOSIT, client_id, tx_id, Decimal(amount))


def withdrawal(client_id: int, tx_id: int, amount: str) -> TransactionRecord:
    return TransactionRecord(TransactionKind.WITHDRAWAL, client_id, tx_id, Decimal(amount))


def dispute(client_id: int, tx_id: int) -> TransactionRecord:
    return TransactionRecord(TransactionKind.DISPUTE, client_id, tx_id)


def resolve(client_id: int, tx_id: int) -> TransactionRecord:
    return TransactionRecord(TransactionKind.RESOLVE, client_id, tx_id)


def chargeback(client_id: int, tx_id: int) -> TransactionRecord:
    return TransactionRecord(TransactionKind.CHARGEBACK, client_id, tx_id)


@pytest.fixture
def records():
    """Record constructors named after transaction kinds."""
    return SimpleNamespace(
        deposit=deposit,
        withdrawal=withdrawal,
        dispute=dispute,
        resolve=resolve,
        chargeback=chargeback,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper that writes CSV lines to a temporary file and returns its path."""

    def _write(lines, name="transactions.csv"):
        csv_path = tmp_path / name
        csv_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return csv_path

    return _write
