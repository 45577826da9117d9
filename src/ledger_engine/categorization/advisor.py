from types import MappingProxyType
from typing import Dict, Mapping


def normalize_description(description: str) -> str:
    """Key used by the hint table: lower-cased and trimmed"""
    return description.lower().strip()


class CategoryAdvisor:
    """
    Learns which category was last used for a given description.

    Keys are exact normalized descriptions - there is no fuzzy matching, so
    "Office Rent" and "Office Rent Jan" never share a hint. The table only
    grows; every learn() overwrites the previous hint for its key.

    Usage:
        ```
        advisor = CategoryAdvisor()
        advisor.learn("AWS Invoice", "Cloud")
        advisor.suggest("  aws invoice ", "uncategorized")  # -> "Cloud"
        advisor.suggest("GCP Invoice", "uncategorized")     # -> "uncategorized"
        ```
    """

    def __init__(self):
        self._hints: Dict[str, str] = {}

    def suggest(self, description: str, fallback_category: str) -> str:
        """
        Suggest a category for a description.

        Args:
            description: Entry description as written by the user or import
            fallback_category: Returned unchanged when no hint exists

        Returns:
            The learned category, or fallback_category
        """
        return self._hints.get(normalize_description(description), fallback_category)

    def learn(self, description: str, category: str) -> None:
        """Remember category as the default for this exact description"""
        self._hints[normalize_description(description)] = category

    @property
    def hints(self) -> Mapping[str, str]:
        """Read-only view of the hint table"""
        return MappingProxyType(self._hints)

    def __len__(self) -> int:
        return len(self._hints)

    def __repr__(self) -> str:
        return f"CategoryAdvisor({len(self._hints)} hints)"
