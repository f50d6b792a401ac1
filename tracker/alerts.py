"""Threshold tiers for overall spending and per-category budgets.

Each tier table is ordered from the highest threshold down; the first
threshold the percentage reaches wins, anything below them all is GOOD.
"""
from decimal import Decimal
from enum import Enum
from typing import Sequence, Tuple

from tracker.aggregator import as_decimal, percentage_of_total
from tracker.config import SAVINGS_RATE


class Tier(str, Enum):
    GOOD = "Good"
    ALERT = "Alert"
    WARNING = "Warning"
    CRITICAL = "Critical"
    OVER_BUDGET = "OverBudget"


class ShareLevel(str, Enum):
    NORMAL = "Normal"
    MEDIUM = "Medium"
    HIGH = "High"


OVERALL_TIERS: Tuple[Tuple[int, Tier], ...] = (
    (90, Tier.CRITICAL),
    (80, Tier.WARNING),
    (70, Tier.ALERT),
)

CATEGORY_TIERS: Tuple[Tuple[int, Tier], ...] = (
    (100, Tier.OVER_BUDGET),
    (80, Tier.WARNING),
    (60, Tier.ALERT),
)

SHARE_LEVELS: Tuple[Tuple[int, ShareLevel], ...] = (
    (30, ShareLevel.HIGH),
    (15, ShareLevel.MEDIUM),
)

# tiers that warrant an alert right after an expense is recorded
ALERTING_TIERS = frozenset({Tier.OVER_BUDGET, Tier.WARNING})


def _first_reached(percentage, table: Sequence[Tuple[int, Enum]], default):
    for threshold, level in table:
        if percentage >= threshold:
            return level
    return default


def classify_overall(percentage) -> Tier:
    return _first_reached(percentage, OVERALL_TIERS, Tier.GOOD)


def classify_category(spent, limit) -> Tier:
    return _first_reached(percentage_of_total(spent, limit), CATEGORY_TIERS, Tier.GOOD)


def classify_share(percentage) -> ShareLevel:
    return _first_reached(percentage, SHARE_LEVELS, ShareLevel.NORMAL)


def recommended_savings(total_income) -> Decimal:
    return as_decimal(total_income) * SAVINGS_RATE


def savings_gap(total_income, total_expenses) -> Decimal:
    """Shortfall against the savings target; 0 once the goal is met."""
    income, expenses = as_decimal(total_income), as_decimal(total_expenses)
    gap = recommended_savings(income) - (income - expenses)
    return max(Decimal("0"), gap)
