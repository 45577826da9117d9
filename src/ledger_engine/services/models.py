"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List
from ledger_engine.domain.enums import ImportSource
from ledger_engine.domain.models import LedgerEntry

@dataclass
class ImportResult:
    """
    Result of importing a batch of candidate entries.

    Every enriched entry is listed in `imported`, in input order. Entries
    recognized as duplicates carry `linked_bank_entry_id` and were not
    added to the store.
    """
    source: ImportSource
    imported: List[LedgerEntry] = field(default_factory=list)

    @property
    def duplicates(self) -> List[LedgerEntry]:
        """Imported entries linked to an existing entry"""
        return [e for e in self.imported if e.linked_bank_entry_id]

    @property
    def duplicates_detected(self) -> int:
        return len(self.duplicates)

    @property
    def persisted(self) -> List[LedgerEntry]:
        """Imported entries that were added to the store"""
        return [e for e in self.imported if not e.linked_bank_entry_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "imported": [e.to_dict() for e in self.imported],
            "duplicates_detected": self.duplicates_detected,
        }

    def __str__(self) -> str:
        "Human-readable summary"
        lines = [
            f"Import summary for {self.source.value}:",
            f" ✅ New entries: {len(self.persisted)}",
            f" 🔗 Duplicates detected: {self.duplicates_detected}",
        ]
        return "\n".join(lines)


@dataclass
class CashflowItem:
    """An operating entry annotated with its signed amount"""
    entry: LedgerEntry
    signed_amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        data["signed_amount"] = str(self.signed_amount)
        return data


@dataclass
class AccountCashflow:
    """Money in and out of a single bank account (transfers excluded)"""
    account: str
    total_in: Decimal = Decimal("0")
    total_out: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        """Net flow (in - out)"""
        return self.total_in - self.total_out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account": self.account,
            "total_in": str(self.total_in),
            "total_out": str(self.total_out),
            "net": str(self.net),
        }


@dataclass
class ExecutiveMetrics:
    """
    Headline figures for the whole ledger.

    `taxes` is also counted inside `total_expenses`.
    """
    revenue: Decimal
    total_expenses: Decimal
    taxes: Decimal
    contribution_margin: Decimal
    net_profit: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": str(self.revenue),
            "total_expenses": str(self.total_expenses),
            "taxes": str(self.taxes),
            "contribution_margin": str(self.contribution_margin),
            "net_profit": str(self.net_profit),
        }


@dataclass
class CostCenter:
    """A category ranked by its share of operating expenses"""
    category: str
    amount: Decimal
    percentage: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "amount": str(self.amount),
            "percentage": str(self.percentage),
        }


@dataclass
class Insights:
    """Heuristic recommendations derived from the ledger"""
    top_cost_centers: List[CostCenter] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top_cost_centers": [c.to_dict() for c in self.top_cost_centers],
            "opportunities": list(self.opportunities),
            "risks": list(self.risks),
            "summary": self.summary,
        }
