"""Shared domain error messages and error types."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from payengine.domain.entities import TransactionRecord


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care that input was rejected.
    """


class ValidationError(DomainError):
    """Invalid input that prevents processing as a whole (e.g. a bad CSV header)."""


class MalformedRecordError(DomainError):
    """A row or value that cannot become a transaction record.

    Raised upstream of the ledger engine; the engine never sees these.
    """


class ApplyError(DomainError):
    """A well-formed record that cannot be applied to the current ledger state.

    Apply errors are never fatal. The record is skipped and the ledger is left
    exactly as it was before the record arrived.
    """

    kind = "apply_error"

    def __init__(self, message: str, record: Optional["TransactionRecord"] = None):
        super().__init__(message)
        self.record = record


class DuplicateTransactionError(ApplyError):
    """A deposit or withdrawal reused a transaction ID already in history."""

    kind = "duplicate_transaction"


class AccountLockedError(ApplyError):
    """The client's account is locked after a chargeback."""

    kind = "account_locked"


class InsufficientFundsError(ApplyError):
    """Not enough available funds to move the requested amount."""

    kind = "insufficient_funds"


class UnknownTransactionError(ApplyError):
    """A dispute-type record referenced a transaction the client never made."""

    kind = "unknown_transaction"


class InvalidStateError(ApplyError):
    """The referenced transaction is not in the dispute state the action requires."""

    kind = "invalid_state"


class AmountOverflowError(ArithmeticError):
    """A balance left the representable fixed-precision range.

    Deliberately not a DomainError: this aborts the run instead of rejecting
    a single record.
    """


def duplicate_transaction(tx_id: int) -> str:
    """Return message for a reused transaction ID."""
    return f"Transaction {tx_id} already exists"


def account_locked(client_id: int) -> str:
    """Return message for a locked account."""
    return f"Account {client_id} is locked"


def insufficient_funds(client_id: int, requested, available) -> str:
    """Return message when available funds do not cover an amount."""
    return (
        f"Account {client_id} has insufficient funds: "
        f"requested {requested}, available {available}"
    )


def unknown_transaction(tx_id: int, client_id: int) -> str:
    """Return message for a reference to a missing transaction."""
    return f"Transaction {tx_id} not found for client {client_id}"


def invalid_dispute_state(tx_id: int, state: str, expected: str) -> str:
    """Return message for a dispute action in the wrong lifecycle state."""
    return f"Transaction {tx_id} is {state}, expected {expected}"


def amount_overflow(value) -> str:
    """Return message for an amount outside the fixed-precision range."""
    return f"Amount {value} exceeds the supported range"


def missing_amount(kind: str) -> str:
    """Return message for a deposit or withdrawal without an amount."""
    return f"Missing amount for {kind}"


def unexpected_amount(kind: str) -> str:
    """Return message for a dispute-type record carrying an amount."""
    return f"Unexpected amount for {kind}"


def negative_amount(value) -> str:
    """Return message for a negative amount."""
    return f"Amount must not be negative, got {value}"


def id_out_of_range(field: str, value, maximum: int) -> str:
    """Return message for a client or transaction ID outside its range."""
    return f"Invalid {field} {value}: must be between 0 and {maximum}"
