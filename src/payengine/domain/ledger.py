"""Ledger engine: applies transaction records to client accounts.

Each record is validated against the current account and the history of
accepted deposits and withdrawals, then either applied in full or rejected
with an ApplyError that leaves the store untouched.

Dispute lifecycle of a history entry::

    CLEAN --dispute--> DISPUTED --resolve--> CLEAN
                          |
                          +--chargeback--> CHARGED_BACK (account locked)
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional

from payengine.database.base import LedgerStore
from payengine.domain.entities import (
    Account,
    DisputeState,
    HistoryEntry,
    ReportRow,
    TransactionKind,
    TransactionRecord,
)
from payengine.domain.errors import (
    AccountLockedError,
    ApplyError,
    DuplicateTransactionError,
    InsufficientFundsError,
    InvalidStateError,
    UnknownTransactionError,
    account_locked,
    duplicate_transaction,
    insufficient_funds,
    invalid_dispute_state,
    unknown_transaction,
)
from payengine.utils.amount_parser import checked_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Ledger engine settings.

    Attributes:
        report_rejections: Log rejected records at WARNING (True) or DEBUG (False)
    """

    report_rejections: bool = True


@dataclass
class ProcessingSummary:
    """Thread-safe counters for one processing run."""

    applied: int = 0
    rejected: Counter = field(default_factory=Counter)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_applied(self) -> None:
        with self._lock:
            self.applied += 1

    def record_rejection(self, error: ApplyError) -> None:
        with self._lock:
            self.rejected[error.kind] += 1

    @property
    def total_rejected(self) -> int:
        return sum(self.rejected.values())

    @property
    def total(self) -> int:
        return self.applied + self.total_rejected


class LedgerEngine:
    """State machine over an explicitly owned ledger store.

    ``apply`` is atomic end to end: it holds the engine lock while it reads
    and writes the store, so any number of threads may feed one engine as
    long as each client's records arrive in order.
    """

    def __init__(self, store: LedgerStore, config: Optional[EngineConfig] = None):
        """Initialize ledger engine.

        Args:
            store: Ledger store, exclusively owned by this engine from now on
            config: Engine settings (defaults to EngineConfig())
        """
        self.store = store
        self.config = config or EngineConfig()
        self._lock = threading.Lock()
        self._handlers = {
            TransactionKind.DEPOSIT: self._deposit,
            TransactionKind.WITHDRAWAL: self._withdrawal,
            TransactionKind.DISPUTE: self._dispute,
            TransactionKind.RESOLVE: self._resolve,
            TransactionKind.CHARGEBACK: self._chargeback,
        }

    def apply(self, record: TransactionRecord) -> None:
        """Apply a single record.

        Args:
            record: Transaction record

        Raises:
            ApplyError: If the record cannot be applied; nothing was changed
            AmountOverflowError: If a balance would leave the supported range
        """
        with self._lock:
            self._handlers[record.kind](record)

    def process_one(self, record: TransactionRecord, summary: ProcessingSummary) -> bool:
        """Apply a record, counting and logging a rejection instead of raising.

        Returns:
            True if the record was applied
        """
        try:
            self.apply(record)
        except ApplyError as error:
            summary.record_rejection(error)
            level = logging.WARNING if self.config.report_rejections else logging.DEBUG
            logger.log(level, "Rejected %s: %s", record, error)
            return False
        summary.record_applied()
        return True

    def process(
        self, records: Iterable[TransactionRecord], summary: Optional[ProcessingSummary] = None
    ) -> ProcessingSummary:
        """Apply records in order until the iterable is exhausted.

        Args:
            records: Transaction records in arrival order
            summary: Summary to add to (a new one is created if None)

        Returns:
            Processing summary
        """
        if summary is None:
            summary = ProcessingSummary()
        for record in records:
            self.process_one(record, summary)
        logger.info("Applied %d records, rejected %d", summary.applied, summary.total_rejected)
        return summary

    def finalize(self) -> list[ReportRow]:
        """Snapshot every account for reporting, in ascending client ID order."""
        with self._lock:
            return [ReportRow.from_account(account) for account in self.store.list_accounts()]

    def _account(self, client_id: int) -> Account:
        account = self.store.get_account(client_id)
        if account is None:
            return Account(client_id=client_id)
        return account

    def _new_entry_account(self, record: TransactionRecord) -> Account:
        """Checks shared by deposits and withdrawals."""
        if self.store.entry_exists(record.tx_id):
            raise DuplicateTransactionError(duplicate_transaction(record.tx_id), record)
        account = self._account(record.client_id)
        if account.locked:
            raise AccountLockedError(account_locked(record.client_id), record)
        return account

    def _disputed_entry(
        self, record: TransactionRecord, expected: DisputeState
    ) -> tuple[Account, HistoryEntry]:
        """Checks shared by disputes, resolves and chargebacks."""
        entry = self.store.get_entry(record.tx_id)
        if entry is None or entry.client_id != record.client_id:
            raise UnknownTransactionError(
                unknown_transaction(record.tx_id, record.client_id), record
            )
        if entry.dispute_state is not expected:
            raise InvalidStateError(
                invalid_dispute_state(record.tx_id, entry.dispute_state.value, expected.value),
                record,
            )
        account = self._account(record.client_id)
        if account.locked:
            raise AccountLockedError(account_locked(record.client_id), record)
        return account, entry

    def _require_available(self, account: Account, amount: Decimal, record: TransactionRecord) -> None:
        if amount > account.available:
            raise InsufficientFundsError(
                insufficient_funds(account.client_id, amount, account.available), record
            )

    @staticmethod
    def _rebalance(account: Account, available: Decimal, held: Decimal, **changes) -> Account:
        checked_amount(available + held)
        return replace(
            account,
            available=checked_amount(available),
            held=checked_amount(held),
            **changes,
        )

    def _deposit(self, record: TransactionRecord) -> None:
        account = self._new_entry_account(record)
        updated = self._rebalance(account, account.available + record.amount, account.held)
        self.store.save(updated, HistoryEntry.from_record(record))

    def _withdrawal(self, record: TransactionRecord) -> None:
        account = self._new_entry_account(record)
        self._require_available(account, record.amount, record)
        updated = self._rebalance(account, account.available - record.amount, account.held)
        self.store.save(updated, HistoryEntry.from_record(record))

    def _dispute(self, record: TransactionRecord) -> None:
        account, entry = self._disputed_entry(record, DisputeState.CLEAN)
        # Holding more than is available would push available below zero
        self._require_available(account, entry.amount, record)
        updated = self._rebalance(
            account, account.available - entry.amount, account.held + entry.amount
        )
        self.store.save(updated, replace(entry, dispute_state=DisputeState.DISPUTED))

    def _resolve(self, record: TransactionRecord) -> None:
        account, entry = self._disputed_entry(record, DisputeState.DISPUTED)
        updated = self._rebalance(
            account, account.available + entry.amount, account.held - entry.amount
        )
        self.store.save(updated, replace(entry, dispute_state=DisputeState.CLEAN))

    def _chargeback(self, record: TransactionRecord) -> None:
        account, entry = self._disputed_entry(record, DisputeState.DISPUTED)
        updated = self._rebalance(
            account, account.available, account.held - entry.amount, locked=True
        )
        self.store.save(updated, replace(entry, dispute_state=DisputeState.CHARGED_BACK))
        logger.info("Account %d locked after chargeback of transaction %d", record.client_id, record.tx_id)
