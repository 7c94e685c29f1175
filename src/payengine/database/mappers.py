"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the table layout can change
without touching the ledger engine.
"""

from payengine.domain import entities as domain
from payengine.database.models import (
    Account as ORMAccount,
    HistoryEntry as ORMHistoryEntry,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        client_id=orm_account.client_id,
        available=orm_account.available,
        held=orm_account.held,
        locked=orm_account.locked,
    )


def account_to_orm(account: domain.Account) -> ORMAccount:
    """Convert domain Account entity to a detached SQLAlchemy Account model."""
    return ORMAccount(
        client_id=account.client_id,
        available=account.available,
        held=account.held,
        locked=account.locked,
    )


def history_entry_to_domain(orm_entry: ORMHistoryEntry) -> domain.HistoryEntry:
    """Convert SQLAlchemy HistoryEntry model to domain HistoryEntry entity."""
    return domain.HistoryEntry(
        tx_id=orm_entry.tx_id,
        client_id=orm_entry.client_id,
        kind=domain.TransactionKind(orm_entry.kind),
        amount=orm_entry.amount,
        dispute_state=domain.DisputeState(orm_entry.dispute_state),
    )


def history_entry_to_orm(entry: domain.HistoryEntry) -> ORMHistoryEntry:
    """Convert domain HistoryEntry entity to a detached SQLAlchemy HistoryEntry model."""
    return ORMHistoryEntry(
        tx_id=entry.tx_id,
        client_id=entry.client_id,
        kind=entry.kind.value,
        amount=entry.amount,
        dispute_state=entry.dispute_state.value,
    )
