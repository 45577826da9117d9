from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional
from uuid import uuid4

from ledger_engine.categorization.advisor import CategoryAdvisor
from ledger_engine.domain.enums import ImportSource
from ledger_engine.domain.models import LedgerEntry
from ledger_engine.logging_setup import get_logger
from ledger_engine.matching.duplicate_matcher import DuplicateMatcher
from ledger_engine.repositories.base import LedgerRepository
from ledger_engine.services.models import ImportResult

_logger = get_logger("ledger_engine.services.ledger_service")


def _new_entry_id() -> str:
    return str(uuid4())


class LedgerService:
    """
    Owns the ledger entries and applies category hints and duplicate checks.

    Lookups that can miss (update, delete, get) return None/False instead of
    raising; the caller decides how to surface "not found".
    """

    def __init__(
        self,
        repository: LedgerRepository,
        category_advisor: Optional[CategoryAdvisor] = None,
        duplicate_matcher: Optional[DuplicateMatcher] = None,
        id_factory: Callable[[], str] = _new_entry_id,
    ):
        self.repository = repository
        self.category_advisor = category_advisor if category_advisor is not None else CategoryAdvisor()
        self._duplicate_matcher: Optional[DuplicateMatcher] = duplicate_matcher
        self._id_factory = id_factory

    @property
    def duplicate_matcher(self) -> DuplicateMatcher:
        """Lazy-load duplicate matcher"""
        if self._duplicate_matcher is None:
            self._duplicate_matcher = DuplicateMatcher()
        return self._duplicate_matcher

    def list_entries(self) -> List[LedgerEntry]:
        """All entries sorted ascending by date; equal dates keep store order"""
        return sorted(self.repository.get_all(), key=lambda e: e.date)

    def get_entry(self, entry_id: str) -> Optional[LedgerEntry]:
        """Return the entry with this id, or None"""
        return self.repository.get_by_id(entry_id)

    def add_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Create an entry.

        The entry's own category is the fallback for the suggestion, so a
        learned hint wins over what the caller sent. The final category is
        then learned for this description.

        Args:
            entry: Entry without id (any id given is replaced)

        Returns:
            The created entry with a fresh id
        """
        with self.repository.transaction():
            category = self.category_advisor.suggest(entry.description, entry.category)
            created = replace(entry, id=self._id_factory(), category=category)
            self.repository.save(created)
            self.category_advisor.learn(created.description, created.category)

        _logger.debug("Added entry %s %r", created.id, created)
        return created

    def restore_entries(self, entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
        """
        Put previously exported entries back into the store as they are.

        Unlike add_entry, ids, links and categories are kept; only entries
        without an id get a fresh one. Each category is learned in order, so
        the last row for a description sets its hint.

        Raises:
            DuplicateEntryIdError: two entries share an id (nothing is stored)
        """
        restored = []
        with self.repository.transaction():
            for entry in entries:
                if entry.id is None:
                    entry = replace(entry, id=self._id_factory())
                self.repository.save(entry)
                restored.append(entry)

            for entry in restored:
                self.category_advisor.learn(entry.description, entry.category)

        _logger.debug("Restored %d entries", len(restored))
        return restored

    def update_entry(self, entry_id: str, changes: Dict[str, Any]) -> Optional[LedgerEntry]:
        """
        Shallow-merge changes over an existing entry.

        Keys set to None are ignored, so a field can be replaced but never
        cleared. The id is never reassigned.

        Args:
            entry_id: Entry to update
            changes: Field name -> new value

        Returns:
            The updated entry, or None if no entry has that id
        """
        fields = {
            name: value for name, value in changes.items()
            if value is not None and name != "id"
        }

        with self.repository.transaction():
            existing = self.repository.get_by_id(entry_id)
            if existing is None:
                _logger.debug("Update skipped, entry %s not found", entry_id)
                return None

            updated = replace(existing, **fields)
            self.repository.update(updated)
            self.category_advisor.learn(updated.description, updated.category)

        _logger.debug("Updated entry %s fields=%s", entry_id, sorted(fields))
        return updated

    def delete_entry(self, entry_id: str) -> bool:
        """
        Delete an entry.

        Entries linked to it through linked_bank_entry_id are left as they are.

        Returns:
            True if an entry was removed, False if none had that id
        """
        removed = self.repository.delete(entry_id)
        if removed:
            _logger.debug("Deleted entry %s", entry_id)
        else:
            _logger.debug("Delete skipped, entry %s not found", entry_id)
        return removed

    def import_entries(
        self,
        source: ImportSource,
        raw_entries: Iterable[LedgerEntry],
    ) -> ImportResult:
        """
        Import a batch of candidate entries.

        Credit-card feeds often restate transactions already present from
        bank statements, so only they are checked for duplicates, against the
        store as it was before this batch. A duplicate is returned with
        linked_bank_entry_id set but is not stored. Document imports
        (pdf, xlsx, ods) are always stored.

        Args:
            source: Where the batch came from
            raw_entries: Candidate entries without id, in input order

        Returns:
            ImportResult listing every enriched entry
        """
        source = ImportSource(source)
        imported: List[LedgerEntry] = []

        with self.repository.transaction():
            existing = self.repository.get_all()

            for raw in raw_entries:
                duplicate = None
                if source == ImportSource.CREDIT_CARD:
                    duplicate = self.duplicate_matcher.find_match(raw, existing)

                enriched = replace(
                    raw,
                    id=self._id_factory(),
                    imported_from=source,
                    category=self.category_advisor.suggest(raw.description, raw.category),
                    linked_bank_entry_id=duplicate.id if duplicate else None,
                )
                imported.append(enriched)

                if duplicate is None:
                    self.repository.save(enriched)
                else:
                    _logger.info(
                        "Duplicate detected: %r restates entry %s", enriched, duplicate.id
                    )

        result = ImportResult(source=source, imported=imported)
        _logger.info(
            "Imported %d entries from %s (%d duplicates)",
            len(imported), source.value, result.duplicates_detected,
        )
        return result
