"""Dictionary-backed ledger store."""

from typing import Optional

from payengine.database.base import LedgerStore
from payengine.domain.entities import Account, HistoryEntry


class InMemoryStore(LedgerStore):
    """In-process implementation of LedgerStore, the default for a run."""

    def __init__(self):
        self._accounts: dict[int, Account] = {}
        self._entries: dict[int, HistoryEntry] = {}

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        self._accounts.clear()
        self._entries.clear()

    def get_account(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def list_accounts(self) -> list[Account]:
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def get_entry(self, tx_id: int) -> Optional[HistoryEntry]:
        return self._entries.get(tx_id)

    def entry_exists(self, tx_id: int) -> bool:
        return tx_id in self._entries

    def save(self, account: Account, entry: HistoryEntry) -> None:
        self._accounts[account.client_id] = account
        self._entries[entry.tx_id] = entry
