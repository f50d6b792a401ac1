"""Category sums, percentages and rankings over a list of transactions.

Everything here is a pure function of its arguments; callers pass the
ledger's current transactions and totals.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from tracker.domain import Kind, LedgerTotals, Transaction
from tracker.filters import MonthMatch, by_kind, by_month, iter_transactions
from tracker.functional import Maybe, Nothing, Some

HUNDRED = Decimal("100")


def as_decimal(value) -> Decimal:
    """Decimal view of an int, float or Decimal; floats go through their repr."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def category_totals(
    trans: Iterable[Transaction],
    kind: Kind,
    month_filter: Optional[str] = None,
    month_match: MonthMatch = MonthMatch.KEY,
) -> Dict[str, Decimal]:
    """Sum amounts of `kind` transactions per category.

    Categories with no matching transaction are left out rather than
    reported as zero. Keys keep first-seen order.
    """
    preds = [by_kind(kind)]
    if month_filter:
        preds.append(by_month(month_filter, month_match))

    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for t in iter_transactions(trans, *preds):
        totals[t.category] += t.amount
    return dict(totals)


def percentage_of_total(amount, total) -> Decimal:
    amount, total = as_decimal(amount), as_decimal(total)
    if total == 0:
        return Decimal("0")
    return amount / total * HUNDRED


def expense_percentage_of_income(totals: LedgerTotals) -> Decimal:
    return percentage_of_total(totals.expenses, totals.income)


def rank_by_amount_descending(totals: Mapping[str, Decimal]) -> List[Tuple[str, Decimal]]:
    # ties go to the alphabetically first category
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def top_category(ranked: List[Tuple[str, Decimal]]) -> Maybe[Tuple[str, Decimal]]:
    if not ranked:
        return Nothing()
    return Some(ranked[0])


def category_shares(totals: Mapping[str, Decimal]) -> List[Tuple[str, Decimal, Decimal]]:
    grand_total = sum(totals.values(), Decimal("0"))
    return [
        (category, amount, percentage_of_total(amount, grand_total))
        for category, amount in rank_by_amount_descending(totals)
    ]
