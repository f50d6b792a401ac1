import re
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional

from tracker.domain import Kind, Transaction


class MonthMatch(str, Enum):
    KEY = "key"
    SUBSTRING = "substring"


# Tried in order after datetime.fromisoformat
_DATE_FORMATS = (
    "%Y-%m",
    "%Y/%m/%d",
    "%Y/%m",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%a %b %d %H:%M:%S %Y",  # C ctime()
    "%b %Y",
    "%B %Y",
)

_LEADING_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})(?:\D|$)")


def current_month(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m")


def month_or_current(text: Optional[str], now: Optional[datetime] = None) -> str:
    """The month a report covers; a blank entry means this month, not all time."""
    text = (text or "").strip()
    return text or current_month(now)


def month_key(label: str) -> Optional[str]:
    """Return the 'YYYY-MM' key of a date label, or None if it can't be read."""
    text = label.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text).strftime("%Y-%m")
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%Y-%m")
        except ValueError:
            continue
    m = _LEADING_YEAR_MONTH.match(text)
    if m and 1 <= int(m.group(2)) <= 12:
        return f"{m.group(1)}-{m.group(2)}"
    return None


def by_kind(kind: Kind):
    def _filter(t: Transaction) -> bool:
        return t.kind is kind

    return _filter


def by_category(category: str):
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_month(month: str, mode: MonthMatch = MonthMatch.KEY):
    """Select transactions dated in `month`.

    KEY compares parsed year-month keys, so a label that merely mentions
    "2024-01" somewhere in free text does not match. A filter that has no
    month key of its own (e.g. "Oct") is matched as a substring instead.
    SUBSTRING keeps the legacy containment test for old data.
    """
    wanted = month_key(month) if mode is MonthMatch.KEY else None

    if wanted is None:
        def _filter(t: Transaction) -> bool:
            return month in t.date
    else:
        def _filter(t: Transaction) -> bool:
            return month_key(t.date) == wanted

    return _filter


def iter_transactions(
    trans: Iterable[Transaction], *preds: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if all(p(t) for p in preds):
            yield t
