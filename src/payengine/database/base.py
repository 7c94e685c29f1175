"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from payengine.domain.entities import Account, HistoryEntry


class LedgerStore(ABC):
    """Abstract account store and transaction history index.

    A store is owned by exactly one ledger engine, which serializes every
    call; implementations need no locking of their own.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the backing storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create an empty ledger, discarding anything stored before."""
        pass

    # Account operations
    @abstractmethod
    def get_account(self, client_id: int) -> Optional[Account]:
        """Get account by client ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts in ascending client ID order."""
        pass

    # History operations
    @abstractmethod
    def get_entry(self, tx_id: int) -> Optional[HistoryEntry]:
        """Get history entry by transaction ID."""
        pass

    @abstractmethod
    def entry_exists(self, tx_id: int) -> bool:
        """Check if a deposit or withdrawal with this transaction ID was accepted."""
        pass

    @abstractmethod
    def save(self, account: Account, entry: HistoryEntry) -> None:
        """Store an account snapshot and the history entry that produced it.

        Both are inserted or replaced together, or not at all.
        """
        pass
