from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional

from ledger_engine.domain.models import LedgerEntry

class DuplicateEntryIdError(Exception):
    """Raised when attempting to save an entry whose id is already stored."""
    pass

class EntryNotFoundError(Exception):
    """Raised when an entry cannot be found."""
    pass

class LedgerRepository(ABC):
    """
    Abstract repository for ledger entries.

    The repository pattern abstracts the data access, so the ledger
    service never touches the underlying collection directly.
    """

    @abstractmethod
    def save(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append an entry to the repository.

        Args:
            entry: Entry to save, with its id already assigned

        Returns:
            The saved entry

        Raises:
            ValueError: If the entry has no id
            DuplicateEntryIdError: If an entry with the same id exists
        """
        pass

    @abstractmethod
    def get_by_id(self, entry_id: str) -> Optional[LedgerEntry]:
        """
        Retrieve an entry by ID.

        Returns:
            Entry if found, None otherwise
        """
        pass

    @abstractmethod
    def get_all(self) -> List[LedgerEntry]:
        """
        Retrieve every entry in insertion order.

        Returns:
            A new list; mutating it does not affect the repository
        """
        pass

    @abstractmethod
    def update(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Replace an existing entry in place, keeping its position.

        Args:
            entry: Entry with updated values

        Returns:
            Updated entry

        Raises:
            EntryNotFoundError: If no entry has that id
        """
        pass

    @abstractmethod
    def delete(self, entry_id: str) -> bool:
        """
        Delete an entry by ID.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Context manager grouping several operations into one atomic step.

        Other callers are kept out for the duration, and changes made inside
        the block are undone if it raises.
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass
