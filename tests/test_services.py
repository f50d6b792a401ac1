from decimal import Decimal

from tracker.alerts import ShareLevel, Tier
from tracker.functional import Nothing, Some
from tracker.ledger import Ledger
from tracker.services import BudgetService, ReportService, budget_rows, spending_analysis


def make_ledger():
    ledger = Ledger()
    ledger.add_transaction("2025-01-01", "Salary", "1000", "Salary", "income")
    ledger.add_transaction("2025-01-02", "Groceries", "300", "Food", "expense")
    ledger.add_transaction("2025-01-03", "Restaurant", "200", "Food", "expense")
    ledger.add_transaction("2025-01-04", "Rent", "400", "Rent", "expense")
    return ledger


def test_spending_analysis_scenario():
    ledger = make_ledger()
    analysis = spending_analysis(ledger, "2025-01")

    assert analysis.income == Decimal("1000")
    assert analysis.expenses == Decimal("900")
    assert analysis.expense_percentage == Decimal("90")
    assert analysis.tier is Tier.CRITICAL
    assert analysis.recommended_savings == Decimal("200")
    assert analysis.actual_savings == Decimal("100")
    assert analysis.savings_gap == Decimal("100")


def test_spending_analysis_empty_ledger():
    analysis = spending_analysis(Ledger(), "2025-01")

    assert analysis.expense_percentage == 0
    assert analysis.tier is Tier.GOOD
    assert analysis.savings_gap == 0
    assert budget_rows(analysis.budget) == []


def test_monthly_report_steps_and_status():
    ledger = make_ledger()
    ledger.set_budget_limit("Food", "600")
    ledger.set_budget_limit("Rent", "400")
    ledger.set_budget_limit("Travel", "100")

    report = BudgetService().monthly_report("2025-01", ledger)

    assert report["month"] == "2025-01"
    assert [s["calculator"] for s in report["steps"]] == ["calc_month_spend", "calc_budget_status"]
    assert report["result"]["month_spend"] == {"Food": Decimal("500"), "Rent": Decimal("400")}

    status = {r.category: r for r in budget_rows(report)}
    assert status["Food"].tier is Tier.WARNING
    assert status["Food"].remaining == Decimal("100")
    assert status["Rent"].tier is Tier.OVER_BUDGET
    assert status["Travel"].spent == 0
    assert status["Travel"].tier is Tier.GOOD
    assert report["result"]["over_budget"] == ["Rent"]


def test_monthly_report_other_month_has_no_spend():
    ledger = make_ledger()
    ledger.set_budget_limit("Food", "600")

    rows = budget_rows(BudgetService().monthly_report("2025-02", ledger))
    assert rows[0].spent == 0


def test_monthly_report_custom_calculators():
    def calc_count(month, ledger, acc, month_match):
        return {"count": len(ledger.transactions)}

    report = BudgetService(calculators=[calc_count]).monthly_report("2025-01", make_ledger())
    assert report["result"] == {"count": 4}


def test_category_report():
    report = ReportService().category_report(make_ledger())

    assert report["income"] == [
        {"category": "Salary", "amount": Decimal("1000"), "percentage": Decimal("100")}
    ]
    expenses = report["expenses"]
    assert [e["category"] for e in expenses] == ["Food", "Rent"]
    assert expenses[0]["share"] is ShareLevel.HIGH
    assert report["top_expense"] == Some(("Food", Decimal("500")))
    assert report["top_expense_share"].get_or_else(None).quantize(Decimal("0.01")) == Decimal("55.56")


def test_category_report_empty():
    report = ReportService().category_report(Ledger())
    assert report["income"] == []
    assert report["expenses"] == []
    assert report["top_expense"] == Nothing()
    assert report["top_expense_share"] == Nothing()
