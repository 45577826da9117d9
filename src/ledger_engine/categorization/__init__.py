"""
Categorization and classification for ledger entries.

Two independent pieces live here:
- CategoryAdvisor learns the last category used for each description and
  suggests it for future writes.
- EntryClassifier turns raw document lines into candidate entries using a
  chain of responsibility of configurable rules.

Quick Start:
    >>> from ledger_engine.categorization import CategoryAdvisor, EntryClassifier
    >>>
    >>> advisor = CategoryAdvisor()
    >>> advisor.learn("Office Rent", "Rent")
    >>> advisor.suggest("office rent", "uncategorized")
    'Rent'
"""
from ledger_engine.categorization.advisor import CategoryAdvisor
from ledger_engine.categorization.classifier import EntryClassifier
from ledger_engine.categorization.base import ClassificationRule
from ledger_engine.categorization.rules import (
    KeywordRule,
    RegexRule,
    UserDefinedRule,
    DefaultRule
)
from ledger_engine.categorization import categories

__all__ = [
    "CategoryAdvisor",
    "EntryClassifier",
    "ClassificationRule",
    "KeywordRule",
    "RegexRule",
    "UserDefinedRule",
    "DefaultRule",
    "categories",
]
