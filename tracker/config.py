"""Runtime configuration.

Defaults live here as constants; each can be overridden through an
environment variable so the dashboard can point at another data folder.
"""
import os
from dataclasses import dataclass
from decimal import Decimal

from tracker.filters import MonthMatch

DATA_FILE = "financial_data.csv"
BUDGET_FILE = "budget_limits.csv"
SAVINGS_RATE = Decimal("0.20")
LOG_LEVEL = "INFO"

TRANSACTION_HEADER = ("Date", "Description", "Amount", "Category", "Type")
BUDGET_HEADER = ("Category", "MonthlyLimit")


@dataclass(frozen=True)
class Settings:
    data_file: str = DATA_FILE
    budget_file: str = BUDGET_FILE
    month_match: MonthMatch = MonthMatch.KEY
    log_level: str = LOG_LEVEL


def load_settings(environ=None) -> Settings:
    env = os.environ if environ is None else environ
    mode = env.get("TRACKER_MONTH_MATCH", MonthMatch.KEY.value).strip().lower()
    try:
        month_match = MonthMatch(mode)
    except ValueError:
        month_match = MonthMatch.KEY
    return Settings(
        data_file=env.get("TRACKER_DATA_FILE", DATA_FILE),
        budget_file=env.get("TRACKER_BUDGET_FILE", BUDGET_FILE),
        month_match=month_match,
        log_level=env.get("TRACKER_LOG_LEVEL", LOG_LEVEL).upper(),
    )
