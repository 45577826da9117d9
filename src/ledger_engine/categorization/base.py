from abc import ABC, abstractmethod
from typing import Optional

from ledger_engine.domain.enums import EntryType
from ledger_engine.domain.models import RawDocumentLine

class ClassificationRule(ABC):
    """
    Abstract base class for all entry type classification rules.

    Implements Chain of Responsibility:
    - Each rule tries to classify a raw line
    - If it can't it passes to the next rule
    - Rules are tried in priority order

    Usage:
        Create chain: specific -> general -> default
        ```
        user_rule = UserDefinedRule(...)
        keyword_rule = KeywordRule(...)
        default_rule = DefaultRule()

        user_rule.set_next(keyword_rule).set_next(default_rule)

        entry_type = user_rule.classify(line)
        ```
    """

    def __init__(self):
        self._next_rule: Optional['ClassificationRule'] = None


    def set_next(self, rule: 'ClassificationRule') -> 'ClassificationRule':
        """
        Set the next rule in the chain.

        Args:
            rule: The next rule to try if this one doesn't match

        Returns:
            The rule that was set (for chaining)

        Example:
            `rule1.set_next(rule2).set_next(rule3)`
        """
        self._next_rule = rule
        return rule

    @abstractmethod
    def _matches(self, line: RawDocumentLine) -> bool:
        """
        Check if this rule matches the line.

        Args:
            line: Raw document line to check

        Returns:
            True if this rule can classify this line
        """
        pass


    @abstractmethod
    def _get_type(self, line: RawDocumentLine) -> EntryType:
        """
        Get the entry type for the line.

        Called only if _matches() returns True.
        """
        pass


    def classify(self, line: RawDocumentLine) -> Optional[EntryType]:
        """
        Attempt to classify a raw line.

        Args:
            line: Raw document line to classify

        Returns:
            Entry type, or None if no rule in the chain matched
        """
        if self._matches(line):
            return self._get_type(line)

        if self._next_rule:
            return self._next_rule.classify(line)

        return None

    def __repr__(self):
        return f"{self.__class__.__name__}()"
