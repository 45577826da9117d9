from typing import Iterable, Optional

from ledger_engine.config.settings import MatchingSettings
from ledger_engine.domain.models import LedgerEntry
from ledger_engine.logging_setup import get_logger
from ledger_engine.matching.similarity import similarity

_logger = get_logger("ledger_engine.matching.duplicate_matcher")


class DuplicateMatcher:
    """
    Finds an existing entry that a candidate most likely restates.

    A pair matches when ALL of these hold:
    - the existing entry is one of the duplicate-prone types (expense, fee, tax)
    - amounts differ by less than the tolerance
    - dates are at most `max_day_gap` calendar days apart
    - descriptions are similar enough (token Jaccard index)

    The first match in iteration order wins; there is no ranking.

    Usage:
        ```
        matcher = DuplicateMatcher()
        match = matcher.find_match(candidate, repository.get_all())
        ```
    """

    def __init__(self, settings: Optional[MatchingSettings] = None):
        """
        Initialize the matcher.

        Args:
            settings: Matching thresholds. If None, loads from ConfigLoader.
        """
        self.settings = settings if settings is not None else MatchingSettings.from_config()

    def is_match(self, existing: LedgerEntry, candidate: LedgerEntry) -> bool:
        """Check a single existing/candidate pair against every predicate"""
        if existing.type not in self.settings.duplicate_types:
            return False

        if abs(existing.amount - candidate.amount) >= self.settings.amount_tolerance:
            return False

        if abs((existing.date - candidate.date).days) > self.settings.max_day_gap:
            return False

        score = similarity(existing.description, candidate.description)
        return score >= self.settings.min_similarity

    def find_match(
        self,
        candidate: LedgerEntry,
        existing: Iterable[LedgerEntry],
    ) -> Optional[LedgerEntry]:
        """
        Return the first existing entry the candidate duplicates.

        Args:
            candidate: Entry about to be imported
            existing: Entries to scan, in store order

        Returns:
            The matching entry, or None if nothing matched
        """
        for entry in existing:
            if self.is_match(entry, candidate):
                _logger.debug(
                    "Candidate %r matches existing entry %s", candidate, entry.id
                )
                return entry

        return None

    def __repr__(self) -> str:
        s = self.settings
        return (
            f"DuplicateMatcher(tolerance={s.amount_tolerance}, "
            f"days={s.max_day_gap}, similarity>={s.min_similarity})"
        )
