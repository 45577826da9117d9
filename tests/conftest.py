import pytest
from datetime import date
from decimal import Decimal
from itertools import count

from ledger_engine.categorization.advisor import CategoryAdvisor
from ledger_engine.config.settings import AnalyticsSettings, MatchingSettings
from ledger_engine.domain.enums import EntryType
from ledger_engine.domain.models import LedgerEntry
from ledger_engine.matching.duplicate_matcher import DuplicateMatcher
from ledger_engine.repositories.memory_ledger_repository import InMemoryLedgerRepository
from ledger_engine.services.analytics_service import AnalyticsService
from ledger_engine.services.ledger_service import LedgerService

@pytest.fixture
def repository() -> InMemoryLedgerRepository:
    """Fresh empty store for each test"""
    return InMemoryLedgerRepository()

@pytest.fixture
def advisor() -> CategoryAdvisor:
    return CategoryAdvisor()

@pytest.fixture
def matcher() -> DuplicateMatcher:
    """Matcher with default thresholds, no config files involved"""
    return DuplicateMatcher(MatchingSettings())

@pytest.fixture
def service(repository, advisor, matcher) -> LedgerService:
    """Ledger service with predictable ids: entry-1, entry-2, ..."""
    ids = count(1)
    return LedgerService(
        repository=repository,
        category_advisor=advisor,
        duplicate_matcher=matcher,
        id_factory=lambda: f"entry-{next(ids)}",
    )

@pytest.fixture
def today() -> date:
    return date(2024, 3, 1)

@pytest.fixture
def analytics(repository, today) -> AnalyticsService:
    return AnalyticsService(repository, settings=AnalyticsSettings(), today=lambda: today)

@pytest.fixture
def make_entry():
    """Factory for candidate entries (no id) with sensible defaults"""
    def _make(
        description: str = "Office Rent",
        amount="100.00",
        type: EntryType = EntryType.EXPENSE,
        entry_date=date(2024, 1, 10),
        category: str = "uncategorized",
        bank_account: str = "checking",
        **extra,
    ) -> LedgerEntry:
        return LedgerEntry(
            date=entry_date,
            description=description,
            amount=Decimal(str(amount)),
            type=type,
            bank_account=bank_account,
            category=category,
            **extra,
        )
    return _make
