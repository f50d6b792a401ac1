from functools import reduce
from typing import Tuple

from tracker.domain import LedgerTotals, Transaction


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def fold_totals(trans: Tuple[Transaction, ...]) -> LedgerTotals:
    return reduce(lambda acc, t: acc.apply(t), trans, LedgerTotals())
