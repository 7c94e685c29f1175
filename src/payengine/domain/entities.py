"""Domain model entities for payengine.

These are pure data classes representing ledger concepts, independent of
how a store keeps them. Stores hand out snapshots and the ledger engine
replaces them wholesale, so every entity here is immutable.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from payengine.domain.errors import (
    MalformedRecordError,
    id_out_of_range,
    missing_amount,
    negative_amount,
    unexpected_amount,
)
from payengine.utils.amount_parser import ZERO, quantize_amount

MAX_CLIENT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1


class TransactionKind(Enum):
    """Transaction record types, valued by their CSV spelling."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        """Deposits and withdrawals move money; the rest reference a prior one."""
        return self in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)


class DisputeState(Enum):
    """Lifecycle of a history entry under dispute."""

    CLEAN = "clean"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass(frozen=True)
class TransactionRecord:
    """A single parsed input record.

    Construction enforces the record's shape: IDs in range, an amount on
    deposits and withdrawals only, never negative. Amounts are rounded to
    four fractional digits.
    """

    kind: TransactionKind
    client_id: int
    tx_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise MalformedRecordError(id_out_of_range("client", self.client_id, MAX_CLIENT_ID))
        if not 0 <= self.tx_id <= MAX_TX_ID:
            raise MalformedRecordError(id_out_of_range("tx", self.tx_id, MAX_TX_ID))

        if not self.kind.carries_amount:
            if self.amount is not None:
                raise MalformedRecordError(unexpected_amount(self.kind.value))
            return

        if self.amount is None:
            raise MalformedRecordError(missing_amount(self.kind.value))
        try:
            amount = quantize_amount(self.amount)
        except ValueError as e:
            raise MalformedRecordError(str(e)) from e
        if amount < 0:
            raise MalformedRecordError(negative_amount(amount))
        object.__setattr__(self, "amount", amount)

    def __str__(self) -> str:
        text = f"{self.kind.value} client={self.client_id} tx={self.tx_id}"
        if self.amount is not None:
            text += f" amount={self.amount}"
        return text


@dataclass(frozen=True)
class Account:
    """Client account snapshot."""

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held


@dataclass(frozen=True)
class HistoryEntry:
    """An accepted deposit or withdrawal, addressable by later disputes."""

    tx_id: int
    client_id: int
    kind: TransactionKind
    amount: Decimal
    dispute_state: DisputeState = DisputeState.CLEAN

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "HistoryEntry":
        return cls(
            tx_id=record.tx_id,
            client_id=record.client_id,
            kind=record.kind,
            amount=record.amount,
        )


@dataclass(frozen=True)
class ReportRow:
    """Final state of one account, amounts fixed at four decimal places."""

    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: Account) -> "ReportRow":
        return cls(
            client_id=account.client_id,
            available=quantize_amount(account.available),
            held=quantize_amount(account.held),
            total=quantize_amount(account.total),
            locked=account.locked,
        )

    def as_tuple(self) -> tuple[int, str, str, str, bool]:
        """Return (client_id, available, held, total, locked) with rendered amounts."""
        return (
            self.client_id,
            f"{self.available:.4f}",
            f"{self.held:.4f}",
            f"{self.total:.4f}",
            self.locked,
        )
