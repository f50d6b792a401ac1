from datetime import datetime
from decimal import Decimal

from tracker.alerts import Tier
from tracker.events import (
    Event, EventBus, TRANSACTION_ADDED,
    check_budget_handler, check_spending_handler, register_default_handlers,
)
from tracker.ledger import Ledger


def make_event(payload):
    return Event(name=TRANSACTION_ADDED, ts=datetime.now().isoformat(), payload=payload)


def make_ledger():
    ledger = Ledger()
    ledger.add_transaction("2025-01-01", "Salary", "1000", "Salary", "income")
    ledger.set_budget_limit("Food", "500")
    return ledger


def test_event_bus_subscribe_and_publish():
    bus = EventBus()
    seen = []

    def handler(event, payload):
        seen.append(payload)
        return {"processed": True}

    bus.subscribe(TRANSACTION_ADDED, handler)
    results = bus.publish(TRANSACTION_ADDED, {"amount": 50})

    assert results == [{"processed": True}]
    assert seen == [{"amount": 50}]


def test_publish_without_subscribers():
    assert EventBus().publish("NOTHING", {}) == []


def test_unsubscribe():
    bus = EventBus()
    handler = lambda event, payload: {"x": 1}
    bus.subscribe(TRANSACTION_ADDED, handler)
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {}) == []


def test_budget_handler_warns_when_approaching_limit():
    ledger = make_ledger()
    ledger.add_transaction("2025-01-02", "Groceries", "300", "Food", "expense")
    t = ledger.add_transaction("2025-01-03", "Dinner", "120", "Food", "expense")

    payload = {"transaction": t, "ledger": ledger, "month": "2025-01"}
    result = check_budget_handler(make_event(payload), payload)

    assert result["spent"] == Decimal("420")
    assert result["tier"] is Tier.WARNING
    assert "Approaching" in result["alert"]


def test_budget_handler_reports_exceeded():
    ledger = make_ledger()
    t = ledger.add_transaction("2025-01-02", "Party", "600", "Food", "expense")

    payload = {"transaction": t, "ledger": ledger, "month": "2025-01"}
    result = check_budget_handler(make_event(payload), payload)

    assert result["tier"] is Tier.OVER_BUDGET
    assert "exceeded" in result["alert"]


def test_budget_handler_only_counts_current_month():
    ledger = make_ledger()
    ledger.add_transaction("2024-12-30", "Old", "450", "Food", "expense")
    t = ledger.add_transaction("2025-01-02", "Snack", "10", "Food", "expense")

    payload = {"transaction": t, "ledger": ledger, "month": "2025-01"}
    result = check_budget_handler(make_event(payload), payload)

    assert result["spent"] == Decimal("10")
    assert result["tier"] is Tier.GOOD
    assert "alert" not in result


def test_budget_handler_ignores_income_and_unbudgeted():
    ledger = make_ledger()
    income = ledger.transactions[0]
    rent = ledger.add_transaction("2025-01-02", "Rent", "400", "Rent", "expense")

    for t in (income, rent):
        payload = {"transaction": t, "ledger": ledger, "month": "2025-01"}
        assert check_budget_handler(make_event(payload), payload) == {}


def test_spending_handler_and_default_registration():
    ledger = make_ledger()
    t = ledger.add_transaction("2025-01-02", "Rent", "900", "Rent", "expense")

    bus = EventBus()
    register_default_handlers(bus)
    register_default_handlers(bus)
    results = bus.publish(TRANSACTION_ADDED, {"transaction": t, "ledger": ledger, "month": "2025-01"})

    assert len(results) == 2
    assert results[1] == check_spending_handler(make_event({}), {"ledger": ledger})
    assert results[1]["spending_tier"] is Tier.CRITICAL
