from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, NamedTuple

from tracker.aggregator import category_totals, expense_percentage_of_income, percentage_of_total
from tracker.alerts import ALERTING_TIERS, Tier, classify_category, classify_overall
from tracker.domain import Kind
from tracker.filters import MonthMatch

__all__ = ['event_bus', 'TRANSACTION_ADDED', 'Event', 'EventBus']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Event, dict], dict]]] = {}

    def subscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        self._subscribers.setdefault(name, [])
        if handler not in self._subscribers[name]:
            self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in self._subscribers[name]]

    def unsubscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"

event_bus = EventBus()


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Compare this month's spend in the transaction's category to its limit.

    payload: {"transaction", "ledger", "month", optional "month_match"}
    """
    t = payload["transaction"]
    ledger = payload["ledger"]
    if t.kind is not Kind.EXPENSE:
        return {}
    limit = ledger.budget_limit(t.category)
    if limit is None:
        return {}

    month_match = payload.get("month_match", MonthMatch.KEY)
    spent = category_totals(ledger.transactions, Kind.EXPENSE, payload["month"], month_match).get(
        t.category, Decimal("0")
    )
    tier = classify_category(spent, limit)
    result = {
        "category": t.category,
        "spent": spent,
        "limit": limit,
        "percentage": percentage_of_total(spent, limit),
        "tier": tier,
    }
    if tier in ALERTING_TIERS:
        if tier is Tier.OVER_BUDGET:
            result["alert"] = f"Budget exceeded for '{t.category}': {spent:.2f} / {limit:.2f}"
        else:
            result["alert"] = f"Approaching budget limit for '{t.category}': {spent:.2f} / {limit:.2f}"
    return result


def check_spending_handler(event: Event, payload: dict) -> dict:
    ledger = payload["ledger"]
    pct = expense_percentage_of_income(ledger.totals)
    return {"expense_percentage": pct, "spending_tier": classify_overall(pct)}


def register_default_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(TRANSACTION_ADDED, check_budget_handler)
    bus.subscribe(TRANSACTION_ADDED, check_spending_handler)


register_default_handlers()
