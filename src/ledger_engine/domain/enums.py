from enum import Enum

class EntryType(Enum):
    """Classifies what a ledger entry represents"""
    REVENUE = "revenue"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    TAX = "tax"
    FEE = "fee"
    ROYALTY = "royalty"


class ImportSource(Enum):
    """Where a ledger entry came from"""
    PDF = "pdf"
    XLSX = "xlsx"
    ODS = "ods"
    MANUAL = "manual"
    CREDIT_CARD = "credit_card"


class FlowDirection(Enum):
    """Direction of a raw document line, derived from its sign"""
    IN = "in"
    OUT = "out"


# Types counted as operating expenses in metrics and insights
OPERATING_EXPENSE_TYPES = frozenset({
    EntryType.EXPENSE,
    EntryType.TAX,
    EntryType.FEE,
    EntryType.ROYALTY,
})
