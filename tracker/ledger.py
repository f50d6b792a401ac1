import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from tracker.domain import BudgetLimit, LedgerTotals, LoadResult, RawRecord, Transaction
from tracker.errors import LedgerError, MalformedRecord
from tracker.functional import Either, parse_amount, parse_kind, safe_budget_limit
from tracker.transforms import add_transaction, fold_totals

logger = logging.getLogger(__name__)


def validate_transaction(
    date: str, description: str, amount, category: str, kind
) -> Either[LedgerError, Transaction]:
    return parse_kind(kind).bind(
        lambda k: parse_amount(amount).map(
            lambda a: Transaction(date=date, description=description, amount=a, category=category, kind=k)
        )
    )


class Ledger:
    """Transactions and budget limits held in memory for one session.

    Totals are an immutable accumulator swapped on every append, so they
    always equal a fresh fold over the transactions.
    """

    def __init__(self):
        self._transactions: Tuple[Transaction, ...] = ()
        self._limits: Dict[str, Decimal] = {}
        self._totals = LedgerTotals()

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    @property
    def totals(self) -> LedgerTotals:
        return self._totals

    @property
    def budget_limits(self) -> Dict[str, Decimal]:
        return dict(self._limits)

    def budget_limit(self, category: str) -> Optional[Decimal]:
        return safe_budget_limit(self._limits, category).get_or_else(None)

    def budget_limit_records(self) -> Tuple[BudgetLimit, ...]:
        return tuple(BudgetLimit(c, limit) for c, limit in self._limits.items())

    def add_transaction(self, date: str, description: str, amount, category: str, kind) -> Transaction:
        """Validate and append one transaction.

        Raises InvalidKind or InvalidAmount; nothing is changed on failure.
        """
        result = validate_transaction(date, description, amount, category, kind)
        if result.is_left():
            raise result.get_error()
        t = result.get_or_else(None)
        self._append(t)
        logger.debug("Recorded %s of %s in %r", t.kind.value, t.amount, t.category)
        return t

    def _append(self, t: Transaction) -> None:
        self._transactions = add_transaction(self._transactions, t)
        self._totals = self._totals.apply(t)

    def set_budget_limit(self, category: str, monthly_limit) -> Optional[Decimal]:
        """Set or replace a category's limit and return the previous one, if any."""
        result = parse_amount(monthly_limit)
        if result.is_left():
            raise result.get_error()
        previous = self._limits.get(category)
        self._limits[category] = result.get_or_else(None)
        if previous is None:
            logger.debug("Budget limit for %r set to %s", category, self._limits[category])
        else:
            logger.debug("Budget limit for %r changed from %s to %s", category, previous, self._limits[category])
        return previous

    def bulk_load(self, records: Iterable[RawRecord]) -> LoadResult:
        attempted = succeeded = 0
        for rec in records:
            attempted += 1
            result = validate_transaction(rec.date, rec.description, rec.amount, rec.category, rec.kind)
            if result.is_left():
                logger.warning("Skipping %s", MalformedRecord(rec.line, str(result.get_error())))
                continue
            self._append(result.get_or_else(None))
            succeeded += 1
        logger.info("Loaded %d of %d transaction records", succeeded, attempted)
        return LoadResult(attempted, succeeded)

    def load_budget_limits(self, rows: Iterable[Tuple[str, str, int]]) -> LoadResult:
        """Apply (category, limit, line) rows, skipping the ones that don't parse."""
        attempted = succeeded = 0
        for category, limit, line in rows:
            attempted += 1
            try:
                self.set_budget_limit(category, limit)
            except LedgerError as e:
                logger.warning("Skipping %s", MalformedRecord(line, str(e)))
                continue
            succeeded += 1
        logger.info("Loaded %d of %d budget limits", succeeded, attempted)
        return LoadResult(attempted, succeeded)

    def recompute_totals(self) -> LedgerTotals:
        return fold_totals(self._transactions)

    def totals_consistent(self) -> bool:
        return self.recompute_totals() == self._totals

    def __len__(self) -> int:
        return len(self._transactions)

    def __repr__(self) -> str:
        return (
            f"Ledger(transactions={len(self._transactions)}, limits={len(self._limits)}, "
            f"income={self._totals.income}, expenses={self._totals.expenses})"
        )
