import threading
import pytest

from ledger_engine.repositories.base import DuplicateEntryIdError, EntryNotFoundError
from ledger_engine.repositories.memory_ledger_repository import InMemoryLedgerRepository

@pytest.fixture
def stored(make_entry):
    entry = make_entry(description="Test Purchase")
    entry.id = "abc"
    return entry


@pytest.mark.unit
class TestInMemoryRepository:

    def test_save_and_get(self, repository: InMemoryLedgerRepository, stored):
        repository.save(stored)

        assert repository.get_by_id("abc") is stored
        assert len(repository) == 1

    def test_save_without_id_raises(self, repository: InMemoryLedgerRepository, make_entry):
        with pytest.raises(ValueError):
            repository.save(make_entry())

    def test_save_duplicate_id_raises(self, repository: InMemoryLedgerRepository, stored):
        repository.save(stored)

        with pytest.raises(DuplicateEntryIdError):
            repository.save(stored)

    def test_get_missing_returns_none(self, repository: InMemoryLedgerRepository):
        assert repository.get_by_id("missing") is None

    def test_get_all_returns_a_copy(self, repository: InMemoryLedgerRepository, stored):
        repository.save(stored)

        snapshot = repository.get_all()
        snapshot.clear()

        assert len(repository) == 1

    def test_update_missing_raises(self, repository: InMemoryLedgerRepository, stored):
        with pytest.raises(EntryNotFoundError):
            repository.update(stored)

    def test_delete(self, repository: InMemoryLedgerRepository, stored):
        repository.save(stored)

        assert repository.delete("abc") is True
        assert repository.delete("abc") is False
        assert len(repository) == 0

    def test_transaction_rolls_back_on_error(self, repository: InMemoryLedgerRepository, stored, make_entry):
        repository.save(stored)
        extra = make_entry()
        extra.id = "xyz"

        with pytest.raises(RuntimeError):
            with repository.transaction():
                repository.save(extra)
                repository.delete("abc")
                raise RuntimeError("boom")

        assert [e.id for e in repository.get_all()] == ["abc"]

    def test_transaction_blocks_other_threads(self, repository: InMemoryLedgerRepository, stored):
        """A reader in another thread waits until the transaction finishes"""
        seen = []

        def reader():
            seen.append(len(repository.get_all()))

        with repository.transaction():
            thread = threading.Thread(target=reader)
            thread.start()
            thread.join(timeout=0.2)
            assert thread.is_alive()
            repository.save(stored)

        thread.join()
        assert seen == [1]
