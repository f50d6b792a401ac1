from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import NamedTuple


class Kind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Transaction:
    date: str         # opaque label, e.g. "2025-09-01" or "Mon Sep  1 10:00:00 2025"
    description: str
    amount: Decimal   # always > 0, the kind carries the sign
    category: str
    kind: Kind


# A monthly spending limit for one category
@dataclass(frozen=True)
class BudgetLimit:
    category: str
    monthly_limit: Decimal


@dataclass(frozen=True)
class LedgerTotals:
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses

    def apply(self, t: Transaction) -> "LedgerTotals":
        if t.kind is Kind.INCOME:
            return LedgerTotals(self.income + t.amount, self.expenses)
        return LedgerTotals(self.income, self.expenses + t.amount)


class RawRecord(NamedTuple):
    """One unparsed row as read from a delimited file."""
    date: str
    description: str
    amount: str
    category: str
    kind: str
    line: int = 0


class LoadResult(NamedTuple):
    attempted: int
    succeeded: int

    @property
    def skipped(self) -> int:
        return self.attempted - self.succeeded
