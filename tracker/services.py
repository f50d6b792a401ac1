from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Sequence

from tracker.aggregator import (
    category_shares,
    category_totals,
    expense_percentage_of_income,
    percentage_of_total,
    rank_by_amount_descending,
    top_category,
)
from tracker.alerts import (
    Tier,
    classify_category,
    classify_overall,
    classify_share,
    recommended_savings,
    savings_gap,
)
from tracker.domain import Kind
from tracker.filters import MonthMatch
from tracker.ledger import Ledger


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    spent: Decimal
    limit: Decimal
    remaining: Decimal
    percentage: Decimal
    tier: Tier


@dataclass(frozen=True)
class SpendingAnalysis:
    income: Decimal
    expenses: Decimal
    balance: Decimal
    expense_percentage: Decimal
    tier: Tier
    recommended_savings: Decimal
    actual_savings: Decimal
    savings_gap: Decimal
    budget: Dict[str, Any]


def calc_month_spend(month: str, ledger: Ledger, acc: dict, month_match: MonthMatch) -> dict:
    return {"month_spend": category_totals(ledger.transactions, Kind.EXPENSE, month, month_match)}


def calc_budget_status(month: str, ledger: Ledger, acc: dict, month_match: MonthMatch) -> dict:
    spend = acc.get("month_spend")
    if spend is None:
        spend = category_totals(ledger.transactions, Kind.EXPENSE, month, month_match)
    rows = []
    for category, limit in ledger.budget_limits.items():
        spent = spend.get(category, Decimal("0"))
        rows.append(BudgetStatus(
            category=category,
            spent=spent,
            limit=limit,
            remaining=limit - spent,
            percentage=percentage_of_total(spent, limit),
            tier=classify_category(spent, limit),
        ))
    return {
        "budget_status": rows,
        "over_budget": [r.category for r in rows if r.tier is Tier.OVER_BUDGET],
    }


DEFAULT_CALCULATORS = (calc_month_spend, calc_budget_status)


class BudgetService:
    """Monthly budget report built by running calculators in sequence.

    calculators: functions taking (month, ledger, acc, month_match) -> dict.
    Each output is merged into `acc`, so later steps can reuse earlier ones.
    """

    def __init__(
        self,
        calculators: Sequence[Callable[..., Dict[str, Any]]] = DEFAULT_CALCULATORS,
        month_match: MonthMatch = MonthMatch.KEY,
    ):
        self.calculators = calculators
        self.month_match = month_match

    def monthly_report(self, month: str, ledger: Ledger) -> Dict[str, Any]:
        report = {"month": month, "steps": [], "result": {}}
        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(month, ledger, acc, self.month_match)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)
        report["result"] = acc
        return report


class ReportService:
    """Income and expense breakdown by category, the data behind the analysis page."""

    def category_report(self, ledger: Ledger) -> Dict[str, Any]:
        income = category_totals(ledger.transactions, Kind.INCOME)
        expenses = category_totals(ledger.transactions, Kind.EXPENSE)
        top = top_category(rank_by_amount_descending(expenses))
        return {
            "income": [
                {"category": c, "amount": a, "percentage": percentage_of_total(a, ledger.totals.income)}
                for c, a in sorted(income.items())
            ],
            "expenses": [
                {"category": c, "amount": a, "percentage": p, "share": classify_share(p)}
                for c, a, p in category_shares(expenses)
            ],
            "top_expense": top,
            "top_expense_share": top.map(lambda item: percentage_of_total(item[1], ledger.totals.expenses)),
        }


def spending_analysis(
    ledger: Ledger, month: str, budget_service: BudgetService = None
) -> SpendingAnalysis:
    totals = ledger.totals
    pct = expense_percentage_of_income(totals)
    budget_service = budget_service or BudgetService()
    return SpendingAnalysis(
        income=totals.income,
        expenses=totals.expenses,
        balance=totals.balance,
        expense_percentage=pct,
        tier=classify_overall(pct),
        recommended_savings=recommended_savings(totals.income),
        actual_savings=totals.balance,
        savings_gap=savings_gap(totals.income, totals.expenses),
        budget=budget_service.monthly_report(month, ledger),
    )


def budget_rows(report: Dict[str, Any]) -> List[BudgetStatus]:
    return report["result"].get("budget_status", [])
