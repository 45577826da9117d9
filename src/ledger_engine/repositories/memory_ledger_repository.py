import threading
from contextlib import contextmanager
from typing import Generator, List, Optional

from ledger_engine.domain.models import LedgerEntry
from ledger_engine.repositories.base import LedgerRepository, DuplicateEntryIdError, EntryNotFoundError

class InMemoryLedgerRepository(LedgerRepository):
    """
    In-process implementation of the LedgerRepository.

    Entries live in a list kept in insertion order. A re-entrant lock
    serializes every access, and transaction() holds it across a multi-step
    mutation so readers never see a half-applied import.
    """

    def __init__(self):
        self._entries: List[LedgerEntry] = []
        self._lock = threading.RLock()

    def save(self, entry: LedgerEntry) -> LedgerEntry:
        """Append a single entry."""
        if entry.id is None:
            raise ValueError("Cannot save entry without ID")

        with self._lock:
            if self._index_of(entry.id) is not None:
                raise DuplicateEntryIdError(f"Entry with ID {entry.id} already exists")
            self._entries.append(entry)

        return entry

    def get_by_id(self, entry_id: str) -> Optional[LedgerEntry]:
        """Retrieve an entry by ID, or None if it doesn't exist"""
        with self._lock:
            index = self._index_of(entry_id)
            return None if index is None else self._entries[index]

    def get_all(self) -> List[LedgerEntry]:
        """Snapshot of all entries in insertion order."""
        with self._lock:
            return list(self._entries)

    def update(self, entry: LedgerEntry) -> LedgerEntry:
        """Replace an existing entry, keeping its position."""
        if entry.id is None:
            raise ValueError("Cannot update entry without ID")

        with self._lock:
            index = self._index_of(entry.id)
            if index is None:
                raise EntryNotFoundError(f"Entry with ID {entry.id} not found")
            self._entries[index] = entry

        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete an entry by ID."""
        with self._lock:
            index = self._index_of(entry_id)
            if index is None:
                return False
            del self._entries[index]
            return True

    @contextmanager
    def transaction(self) -> Generator["InMemoryLedgerRepository", None, None]:
        """
        Context manager for multi-step mutations.

        Restores the entry list on exception.

        Usage:
            with repository.transaction():
                repository.save(first)
                repository.save(second)
        """
        with self._lock:
            snapshot = list(self._entries)
            try:
                yield self
            except Exception:
                self._entries = snapshot
                raise

    def _index_of(self, entry_id: str) -> Optional[int]:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"InMemoryLedgerRepository({len(self)} entries)"
