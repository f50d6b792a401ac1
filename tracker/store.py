"""Flat-file persistence for the ledger.

Rows are plain comma-joined fields with no quoting, so a comma inside a
description shifts the remaining columns. Saves overwrite the whole file;
a crash mid-write can leave it truncated.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from tracker.config import BUDGET_HEADER, TRANSACTION_HEADER, Settings
from tracker.domain import BudgetLimit, RawRecord, Transaction
from tracker.errors import FileUnavailable
from tracker.ledger import Ledger

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


def _read_text(path: str) -> str:
    """File contents as UTF-8, or as cp1252 for spreadsheet exports that are not."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FileUnavailable(path, e.strerror or str(e)) from e
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("%s is not UTF-8, reading it as cp1252", path)
        return data.decode("cp1252", errors="replace")


def _data_lines(path: str) -> List[Tuple[int, str]]:
    """Numbered lines after the header, minus blanks and comments."""
    lines = _read_text(path).splitlines()

    out = []
    for lineno, line in enumerate(lines[1:], start=2):
        if not line.strip() or line.lstrip().startswith(COMMENT_PREFIX):
            continue
        out.append((lineno, line))
    return out


def _fields(line: str, count: int) -> List[str]:
    parts = line.split(",")[:count]
    return parts + [""] * (count - len(parts))


def read_transaction_records(path: str, strip_quotes: bool = False) -> List[RawRecord]:
    records = []
    for lineno, line in _data_lines(path):
        date, description, amount, category, kind = _fields(line, 5)
        if strip_quotes:
            date, description, category, kind = (
                s.replace('"', "") for s in (date, description, category, kind)
            )
        records.append(RawRecord(date, description, amount, category, kind, lineno))
    return records


def read_budget_rows(path: str) -> List[Tuple[str, str, int]]:
    rows = []
    for lineno, line in _data_lines(path):
        category, limit = _fields(line, 2)
        if limit.strip():
            rows.append((category, limit, lineno))
    return rows


def _format_row(t: Transaction) -> str:
    return f"{t.date},{t.description},{t.amount:.2f},{t.category},{t.kind.value}"


def _write_lines(path: str, lines: Iterable[str]) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        raise FileUnavailable(path, e.strerror or str(e)) from e


def write_transactions(path: str, transactions: Iterable[Transaction]) -> None:
    _write_lines(path, [",".join(TRANSACTION_HEADER)] + [_format_row(t) for t in transactions])


def write_budget_limits(path: str, limits: Iterable[BudgetLimit]) -> bool:
    """Write limits; an empty set leaves any existing file alone."""
    limits = list(limits)
    if not limits:
        return False
    _write_lines(
        path,
        [",".join(BUDGET_HEADER)] + [f"{b.category},{b.monthly_limit:.2f}" for b in limits],
    )
    return True


def export_transactions(path: str, ledger: Ledger, generated_on: Optional[str] = None) -> None:
    """Write the transactions preceded by '#' summary lines."""
    totals = ledger.totals
    generated_on = generated_on or datetime.now().strftime("%a %b %d %H:%M:%S %Y")
    summary = [
        f"# Export generated on: {generated_on}",
        f"# Total transactions: {len(ledger.transactions)}",
        f"# Total income: ${totals.income:.2f}",
        f"# Total expenses: ${totals.expenses:.2f}",
        f"# Net balance: ${totals.balance:.2f}",
    ]
    _write_lines(
        path,
        [",".join(TRANSACTION_HEADER)] + summary + [_format_row(t) for t in ledger.transactions],
    )
    logger.info("Exported %d transactions to %s", len(ledger.transactions), path)


def import_transactions(ledger: Ledger, path: str):
    """Append rows from a user-supplied (e.g. spreadsheet-exported) file."""
    result = ledger.bulk_load(read_transaction_records(path, strip_quotes=True))
    logger.info("Imported %d of %d rows from %s", result.succeeded, result.attempted, path)
    return result


def open_ledger(settings: Settings) -> Ledger:
    ledger = Ledger()
    try:
        ledger.bulk_load(read_transaction_records(settings.data_file))
    except FileUnavailable:
        logger.info("No data file at %s, starting fresh", settings.data_file)
    try:
        ledger.load_budget_limits(read_budget_rows(settings.budget_file))
    except FileUnavailable:
        logger.info("No budget file at %s", settings.budget_file)
    return ledger


def save_ledger(ledger: Ledger, settings: Settings) -> None:
    write_transactions(settings.data_file, ledger.transactions)
    write_budget_limits(settings.budget_file, ledger.budget_limit_records())
    logger.info("Saved %d transactions to %s", len(ledger.transactions), settings.data_file)
