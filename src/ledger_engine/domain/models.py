from dataclasses import dataclass
from decimal import Decimal
from datetime import date
from typing import Any, Dict, Optional
from ledger_engine.domain.enums import EntryType, FlowDirection, ImportSource

# camelCase keys accepted from exported ledgers
_FIELD_ALIASES = {
    "bankAccount": "bank_account",
    "importedFrom": "imported_from",
    "linkedBankEntryId": "linked_bank_entry_id",
}


def _to_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class LedgerEntry:
    """Core domain model representing a single ledger entry"""
    date: date
    description: str
    amount: Decimal
    type: EntryType
    bank_account: str
    category: str
    imported_from: Optional[ImportSource] = None
    linked_bank_entry_id: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        """Coerce loose input and keep amount a non-negative magnitude"""
        self.date = _to_date(self.date)
        self.amount = abs(_to_decimal(self.amount))
        self.type = EntryType(self.type)
        if self.imported_from is not None:
            self.imported_from = ImportSource(self.imported_from)

    @property
    def signed_amount(self) -> Decimal:
        """Return amount with sign for cashflow calculations"""
        return self.amount if self.type == EntryType.REVENUE else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with JSON-friendly values"""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": str(self.amount),
            "type": self.type.value,
            "bank_account": self.bank_account,
            "category": self.category,
            "imported_from": self.imported_from.value if self.imported_from else None,
            "linked_bank_entry_id": self.linked_bank_entry_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerEntry":
        """
        Build an entry from a dict produced by to_dict() or an exported ledger.

        Unknown keys raise TypeError; missing required keys raise TypeError too.
        """
        fields = {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}
        return cls(**fields)

    def __repr__(self):
        sign = "+" if self.type == EntryType.REVENUE else "-"
        return f"LedgerEntry({self.date}, {self.description[:30]}, {sign}{self.amount}, {self.type.value})"


@dataclass
class RawDocumentLine:
    """A line as read from a statement or export, before classification"""
    date: date
    amount: Decimal
    description: str
    account_hint: Optional[str] = None

    def __post_init__(self):
        self.date = _to_date(self.date)
        self.amount = _to_decimal(self.amount)

    @property
    def direction(self) -> FlowDirection:
        return FlowDirection.OUT if self.amount < 0 else FlowDirection.IN
