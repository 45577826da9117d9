import re
from typing import Dict, List, Optional

from ledger_engine.categorization.base import ClassificationRule
from ledger_engine.domain.models import RawDocumentLine
from ledger_engine.domain.enums import EntryType, FlowDirection


class KeywordRule(ClassificationRule):
    """
    Rule that matches keywords in raw line descriptions.

    Features:
    - Case-insensitive substring matching
    - Can match multiple keywords per entry type
    - Can be restricted to inflows or outflows

    Example:
        ```
        # "Invoice paid #123" -> revenue
        rule = KeywordRule({
            EntryType.REVENUE: ["invoice paid", "payment received"]
        })
        ```
    """

    def __init__(
            self,
            keyword_map: Dict[EntryType, List[str]],
            direction: Optional[FlowDirection] = None
        ):
        """
        Initialize keyword rule

        Args:
            keyword_map: Dict mapping entry types to list of keywords.
                Example: `{EntryType.TRANSFER: ["internal transfer"]}`
            direction: Optional filter for IN or OUT lines only
        """
        super().__init__()
        self.keyword_map = keyword_map
        self.direction = direction

        self._normalized_map: Dict[EntryType, List[str]] = {}
        for entry_type, keywords in keyword_map.items():
            self._normalized_map[entry_type] = [kw.lower() for kw in keywords]

    def _find(self, line: RawDocumentLine) -> Optional[EntryType]:
        if self.direction and line.direction != self.direction:
            return None

        description_lower = line.description.lower()

        for entry_type, keywords in self._normalized_map.items():
            for keyword in keywords:
                if keyword in description_lower:
                    return entry_type

        return None

    def _matches(self, line: RawDocumentLine) -> bool:
        """Check if any keyword matches the description"""
        return self._find(line) is not None

    def _get_type(self, line: RawDocumentLine) -> EntryType:
        """Return the entry type for the matched keyword."""
        entry_type = self._find(line)
        if entry_type is None:
            raise RuntimeError("_get_type called but no match found")
        return entry_type

    def __repr__(self):
        num_types = len(self.keyword_map)
        direction_filter = f", direction={self.direction.value}" if self.direction else ""
        return f"KeywordRule({num_types} types{direction_filter})"


class RegexRule(ClassificationRule):
    """
    Rule that matches regex patterns in descriptions.

    Example:
        # Royalty statements from a distributor: "ROYALTY Q1", "royalties - 2024"
        rule = RegexRule({
            EntryType.ROYALTY: [r"^royalt(y|ies)\\b"]
        })
    """

    def __init__(
        self,
        pattern_map: Dict[EntryType, List[str]],
        direction: Optional[FlowDirection] = None
    ):
        """
        Initialize regex rule.

        Args:
            pattern_map: Dict mapping entry types to regex patterns
            direction: Optional filter for IN or OUT lines only
        """
        super().__init__()
        self.pattern_map = pattern_map
        self.direction = direction

        self._compiled_patterns: Dict[EntryType, List[re.Pattern]] = {}
        for entry_type, patterns in pattern_map.items():
            self._compiled_patterns[entry_type] = [
                re.compile(pattern, re.IGNORECASE) for pattern in patterns
            ]

    def _find(self, line: RawDocumentLine) -> Optional[EntryType]:
        if self.direction and line.direction != self.direction:
            return None

        for entry_type, patterns in self._compiled_patterns.items():
            for pattern in patterns:
                if pattern.search(line.description):
                    return entry_type

        return None

    def _matches(self, line: RawDocumentLine) -> bool:
        """Check if any pattern matches the description"""
        return self._find(line) is not None

    def _get_type(self, line: RawDocumentLine) -> EntryType:
        """Return the entry type for the matched pattern"""
        entry_type = self._find(line)
        if entry_type is None:
            raise RuntimeError("_get_type called but no match found")
        return entry_type

    def __repr__(self) -> str:
        num_types = len(self.pattern_map)
        direction_filter = f", direction={self.direction.value}" if self.direction else ""
        return f"RegexRule({num_types} types{direction_filter})"


class UserDefinedRule(ClassificationRule):
    """
    Rule that uses user-defined mappings from config.

    Loaded from config/classification_rules.json and has
    highest priority in the chain.

    Config format:
        {
            "rules": [
                {
                    "entry_type": "fee",
                    "patterns": ["monthly fee", "wire charge"],
                    "type": "keyword",
                    "direction": "out"  // optional
                },
                {
                    "entry_type": "tax",
                    "patterns": ["^IRS\\b", "VAT PAYMENT"],
                    "type": "regex"
                }
            ]
        }
    """
    def __init__(
        self,
        rules_config: List[Dict]
    ):
        """
        Initialize with user-defined rules from config.

        Args:
            rules_config: List of rule definitions from JSON config
        """
        super().__init__()
        self.rules = rules_config

        self._keyword_rules: List[KeywordRule] = []
        self._regex_rules: List[RegexRule] = []

        for rule_def in self.rules:
            entry_type = EntryType(rule_def["entry_type"])
            patterns = rule_def["patterns"]
            rule_type = rule_def.get("type", "keyword")

            direction = None
            if "direction" in rule_def:
                direction = FlowDirection(rule_def["direction"])

            if rule_type == "keyword":
                self._keyword_rules.append(
                    KeywordRule({entry_type: patterns}, direction)
                )
            elif rule_type == "regex":
                self._regex_rules.append(
                    RegexRule({entry_type: patterns}, direction)
                )
            else:
                raise ValueError(f"Unknown rule type '{rule_type}'")

    def _matches(self, line: RawDocumentLine) -> bool:
        """Check if any user-defined rule matched."""
        return any(rule._matches(line) for rule in self._keyword_rules + self._regex_rules)

    def _get_type(self, line: RawDocumentLine) -> EntryType:
        """Get entry type from the first matching rule, keywords before regexes"""
        for rule in self._keyword_rules + self._regex_rules:
            if rule._matches(line):
                return rule._get_type(line)

        raise RuntimeError("_get_type called but no match found")

    def __repr__(self) -> str:
        num_rules = len(self.rules)
        return f"UserDefinedRule({num_rules} rules)"

class DefaultRule(ClassificationRule):
    """
    Fallback rule that always matches.

    Should be the last rule in the chain.
    """

    def __init__(self, default_type: EntryType = EntryType.EXPENSE):
        """
        Initialize the default rule.

        Args:
            default_type: The entry type to return
        """
        super().__init__()
        self.default_type = default_type

    def _matches(self, _: RawDocumentLine) -> bool:
        """Always matches"""
        return True

    def _get_type(self, _: RawDocumentLine) -> EntryType:
        """Only returns the default type."""
        return self.default_type

    def __repr__(self) -> str:
        return f"DefaultRule('{self.default_type.value}')"
