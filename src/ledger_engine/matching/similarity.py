from typing import Set


def tokenize(text: str) -> Set[str]:
    """Lower-case text and split on whitespace into unique tokens"""
    return set(text.lower().split())


def similarity(first_text: str, second_text: str) -> float:
    """
    Jaccard index between the token sets of two descriptions.

    Token identity matters, position and frequency do not. Symmetric and
    bounded in [0, 1].

    Args:
        first_text: First description
        second_text: Second description

    Returns:
        |intersection| / |union|, or 0.0 when both texts have no tokens

    Example:
        >>> similarity("Office Rent Jan", "office rent")
        0.6666666666666666
    """
    first_tokens = tokenize(first_text)
    second_tokens = tokenize(second_text)

    union = first_tokens | second_tokens
    if not union:
        return 0.0

    return len(first_tokens & second_tokens) / len(union)
