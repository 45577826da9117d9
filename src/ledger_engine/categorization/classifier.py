from typing import Dict, Any, Iterable, List, Optional

from ledger_engine.categorization.base import ClassificationRule
from ledger_engine.categorization.rules import (
    UserDefinedRule,
    KeywordRule,
    DefaultRule
)
from ledger_engine.categorization.categories import (
    UNCATEGORIZED,
    REVENUE_KEYWORDS,
    TRANSFER_KEYWORDS,
)
from ledger_engine.config.settings import ConfigLoader
from ledger_engine.domain.enums import EntryType, ImportSource
from ledger_engine.domain.models import LedgerEntry, RawDocumentLine
from ledger_engine.logging_setup import get_logger

_logger = get_logger("ledger_engine.categorization.classifier")

class EntryClassifier:
    """
    Turns raw document lines into candidate ledger entries.

    Builds a chain of rules in priority order:
    1. User-defined rules (from config)
    2. Built-in revenue keywords
    3. Built-in transfer keywords
    4. Default (expense)

    Usage:
        # Production - loads user rules from ConfigLoader
        classifier = EntryClassifier()

        # Testing - inject custom config
        classifier = EntryClassifier(config={"rules": [...]})

        entry_type = classifier.classify(line)
        candidates = classifier.to_ledger_entries(lines, "checking", ImportSource.XLSX)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        use_defaults: bool = True
    ):
        """
        Initialize the classifier.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
            use_defaults: Whether to include the built-in keyword rules
        """
        self.use_defaults = use_defaults
        self._rule_chain: Optional[ClassificationRule] = None

        self._build_rule_chain(config)

    def _load_user_rules_config(
        self,
        config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        if config is not None:
            return config

        try:
            return ConfigLoader.load_classification_config()
        except FileNotFoundError:
            # No custom rules configured
            return {"rules": []}

    def _build_rule_chain(
        self,
        user_config: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Build the chain of responsibility for classification rules.

        Args:
            user_config: Optional user config dict for testing
        """
        rules: List[ClassificationRule] = []

        user_rules = self._load_user_rules_config(user_config).get("rules", [])
        if user_rules:
            rules.append(UserDefinedRule(user_rules))

        if self.use_defaults:
            rules.append(KeywordRule({EntryType.REVENUE: REVENUE_KEYWORDS}))
            rules.append(KeywordRule({EntryType.TRANSFER: TRANSFER_KEYWORDS}))

        rules.append(DefaultRule(EntryType.EXPENSE))

        self._rule_chain = rules[0]
        for i in range(len(rules) - 1):
            rules[i].set_next(rules[i + 1])

    def classify(self, line: RawDocumentLine) -> EntryType:
        """
        Classify a single raw line.

        Example:
            ```
            >>> classifier = EntryClassifier()
            >>> classifier.classify(RawDocumentLine(date(2024, 1, 3), Decimal("900"), "Invoice paid #88"))
            <EntryType.REVENUE: 'revenue'>
            ```
        """
        if not self._rule_chain:
            raise RuntimeError("Rule chain not initialized")

        entry_type = self._rule_chain.classify(line)

        assert entry_type is not None, "Rule chain should never return None"

        return entry_type

    def to_ledger_entry(
        self,
        line: RawDocumentLine,
        default_bank_account: str,
        source: ImportSource = ImportSource.PDF,
    ) -> LedgerEntry:
        """
        Build a candidate entry (no id) from a raw line.

        Args:
            line: Raw document line
            default_bank_account: Account used when the line carries no hint
            source: Provenance recorded on the candidate

        Returns:
            LedgerEntry with non-negative amount and placeholder category
        """
        return LedgerEntry(
            date=line.date,
            description=line.description,
            amount=abs(line.amount),
            type=self.classify(line),
            bank_account=line.account_hint or default_bank_account,
            category=UNCATEGORIZED,
            imported_from=ImportSource(source),
        )

    def to_ledger_entries(
        self,
        lines: Iterable[RawDocumentLine],
        default_bank_account: str,
        source: ImportSource = ImportSource.PDF,
    ) -> List[LedgerEntry]:
        """Build candidate entries for a batch of raw lines, in input order"""
        candidates = [
            self.to_ledger_entry(line, default_bank_account, source) for line in lines
        ]
        _logger.debug("Classified %d raw lines from %s", len(candidates), ImportSource(source).value)
        return candidates

    def get_rule_chain_info(self) -> str:
        """
        Get information about the current rule chain.

        Returns:
            String description of the current rule chain.
        """
        if not self._rule_chain:
            return "No rules loaded"

        rules = []
        current = self._rule_chain
        priority = 1

        while current:
            rules.append(f"{priority}. {current}")
            current = current._next_rule
            priority += 1

        return "\n".join(rules)

    def __repr__(self) -> str:
        num_rules = 0
        current = self._rule_chain
        while current:
            num_rules += 1
            current = current._next_rule

        return f"EntryClassifier({num_rules} rules in chain)"
