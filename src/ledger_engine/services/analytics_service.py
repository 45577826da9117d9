from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Iterable, List, Optional

from ledger_engine.config.settings import AnalyticsSettings
from ledger_engine.domain.enums import EntryType, OPERATING_EXPENSE_TYPES
from ledger_engine.domain.models import LedgerEntry
from ledger_engine.logging_setup import get_logger
from ledger_engine.repositories.base import LedgerRepository
from ledger_engine.services.models import (
    AccountCashflow,
    CashflowItem,
    CostCenter,
    ExecutiveMetrics,
    Insights,
)

_logger = get_logger("ledger_engine.services.analytics_service")

INSUFFICIENT_DATA_SUMMARY = "No sufficient data available yet for automated recommendations."
RISK_NO_REVENUE = "No revenue in the recent period: critical cash risk."
RISK_EXPENSES_EXCEED_REVENUE = "Expenses exceeded revenue in the last {days} days: review cost structure."
RISK_MARGIN = "Expenses are above {ratio}% of revenue: margin at risk."
RISK_CONTROLLED = "Financial risk is currently controlled for the analyzed period."

_CENTS = Decimal("0.01")
_ZERO = Decimal("0")


def _round2(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_percentage(value: Decimal) -> str:
    """Percentage without trailing zeros, e.g. 50.00 -> 50 and 75.50 -> 75.5"""
    return f"{value.normalize():f}"


def _total(entries: Iterable[LedgerEntry]) -> Decimal:
    return sum((e.amount for e in entries), _ZERO)


class AnalyticsService:
    """
    Read-side figures derived from the current ledger contents.

    Every public method reads a single snapshot of the repository, so
    results always reflect completed mutations only.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        settings: Optional[AnalyticsSettings] = None,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.settings = settings if settings is not None else AnalyticsSettings.from_config()
        self._today = today

    def operating_cashflow(self) -> List[CashflowItem]:
        """Revenue and expense entries in store order, with signed amounts"""
        return [
            CashflowItem(entry=entry, signed_amount=entry.signed_amount)
            for entry in self.repository.get_all()
            if entry.type in (EntryType.REVENUE, EntryType.EXPENSE)
        ]

    def cashflow_by_account(self) -> List[AccountCashflow]:
        """
        Totals per bank account, in order of first appearance.

        Transfers are skipped; revenue counts as money in and every other
        type as money out.
        """
        grouped: Dict[str, AccountCashflow] = {}

        for entry in self.repository.get_all():
            if entry.type == EntryType.TRANSFER:
                continue

            current = grouped.setdefault(entry.bank_account, AccountCashflow(account=entry.bank_account))
            if entry.type == EntryType.REVENUE:
                current.total_in += entry.amount
            else:
                current.total_out += entry.amount

        return list(grouped.values())

    def executive_metrics(self) -> ExecutiveMetrics:
        """Revenue, operating expenses, taxes, contribution margin and net profit"""
        entries = self.repository.get_all()

        revenue = _total(e for e in entries if e.type == EntryType.REVENUE)
        total_expenses = _total(e for e in entries if e.type in OPERATING_EXPENSE_TYPES)
        taxes = _total(e for e in entries if e.type == EntryType.TAX)

        if revenue == 0:
            contribution_margin = _ZERO
        else:
            contribution_margin = _round2((revenue - total_expenses) / revenue * 100)

        return ExecutiveMetrics(
            revenue=revenue,
            total_expenses=total_expenses,
            taxes=taxes,
            contribution_margin=contribution_margin,
            net_profit=revenue - total_expenses,
        )

    def top_cost_centers(self) -> List[CostCenter]:
        """Categories with the largest share of operating expenses"""
        return self._top_cost_centers(self.repository.get_all())

    def ai_insights(self) -> Insights:
        """
        Heuristic recommendations built from cost concentration and recent risk.

        Cost centers and risks are computed from the same snapshot.

        Returns:
            Insights with the top cost centers, one opportunity per cost
            center, the current risk signal and a one-line summary
        """
        entries = self.repository.get_all()
        top = self._top_cost_centers(entries)

        opportunities = []
        for center in top:
            if center.percentage > self.settings.concentration_threshold:
                opportunities.append(
                    f"{center.category} represents {format_percentage(center.percentage)}% of expenses. "
                    f"Review contracts and consumption targets."
                )
            else:
                opportunities.append(
                    f"Monitor {center.category} ({center.amount:.2f}) to keep spending stable."
                )

        if not top:
            summary = INSUFFICIENT_DATA_SUMMARY
        else:
            summary = f"Current top cost centers: {', '.join(c.category for c in top)}."

        return Insights(
            top_cost_centers=top,
            opportunities=opportunities,
            risks=self._risk_signals(entries),
            summary=summary,
        )

    def detect_risk_signals(self) -> List[str]:
        """Exactly one risk message for the trailing window (start day included)"""
        return self._risk_signals(self.repository.get_all())

    def _top_cost_centers(self, entries: List[LedgerEntry]) -> List[CostCenter]:
        expenses = [e for e in entries if e.type in OPERATING_EXPENSE_TYPES]
        total_expenses = _total(expenses)

        totals_by_category: Dict[str, Decimal] = {}
        for entry in expenses:
            totals_by_category[entry.category] = totals_by_category.get(entry.category, _ZERO) + entry.amount

        ranked = sorted(
            (
                CostCenter(
                    category=category,
                    amount=amount,
                    percentage=_round2(amount / total_expenses * 100) if total_expenses else _ZERO,
                )
                for category, amount in totals_by_category.items()
            ),
            key=lambda c: c.amount,
            reverse=True,
        )
        return ranked[:self.settings.top_cost_centers]

    def _risk_signals(self, entries: List[LedgerEntry]) -> List[str]:
        """
        First matching rule wins:
        1. no revenue but some expenses
        2. expenses above revenue
        3. expenses above the margin-risk ratio of revenue
        4. otherwise controlled
        """
        window_days = self.settings.risk_window_days
        window_start = self._today() - timedelta(days=window_days)
        recent = [e for e in entries if e.date >= window_start]

        revenue = _total(e for e in recent if e.type == EntryType.REVENUE)
        expenses = _total(e for e in recent if e.type in OPERATING_EXPENSE_TYPES)

        _logger.debug(
            "Risk window from %s: revenue=%s expenses=%s", window_start, revenue, expenses
        )

        if revenue == 0 and expenses > 0:
            return [RISK_NO_REVENUE]
        if expenses > revenue:
            return [RISK_EXPENSES_EXCEED_REVENUE.format(days=window_days)]
        if revenue > 0 and expenses / revenue > self.settings.margin_risk_ratio:
            ratio = format_percentage(self.settings.margin_risk_ratio * 100)
            return [RISK_MARGIN.format(ratio=ratio)]

        return [RISK_CONTROLLED]
