"""Built-in category placeholder and classification phrases."""

UNCATEGORIZED = "uncategorized"

# Phrases that mark a raw line as incoming revenue
REVENUE_KEYWORDS = [
    "payment received",
    "bank transfer received",
    "invoice paid",
]

# Phrases that mark a raw line as a movement between own accounts
TRANSFER_KEYWORDS = [
    "internal transfer",
    "account transfer",
]
