import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import datetime
from decimal import Decimal

import streamlit as st
import pandas as pd
import plotly.express as px

from tracker.alerts import Tier
from tracker.config import load_settings
from tracker.domain import Kind
from tracker.errors import FileUnavailable, InvalidAmount, InvalidKind
from tracker.events import event_bus, TRANSACTION_ADDED
from tracker.filters import current_month, month_or_current
from tracker.services import BudgetService, ReportService, budget_rows, spending_analysis
from tracker.store import export_transactions, import_transactions, open_ledger, save_ledger

settings = load_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("tracker.app")

st.set_page_config(page_title="Expense & Savings Tracker", layout="wide")

TIER_ICONS = {
    Tier.GOOD: "✅",
    Tier.ALERT: "🔔",
    Tier.WARNING: "⚠️",
    Tier.CRITICAL: "🚨",
    Tier.OVER_BUDGET: "🚨",
}

TIER_MESSAGES = {
    Tier.CRITICAL: "Cut down expenses drastically: review non-essential spending and cancel unnecessary subscriptions.",
    Tier.WARNING: "Consider reducing expenses. Set budget limits and track daily spending more carefully.",
    Tier.ALERT: "Monitor your spending carefully and consider setting budget limits.",
    Tier.GOOD: "Your spending is under control. Keep up the good habits!",
}


def money(amount) -> str:
    return f"${amount:,.2f}"


def persist(ledger) -> None:
    try:
        save_ledger(ledger, settings)
    except FileUnavailable as e:
        logger.error("Save failed: %s", e)
        st.error(f"Could not save data: {e}")


if "ledger" not in st.session_state:
    st.session_state.ledger = open_ledger(settings)
if "alerts" not in st.session_state:
    st.session_state.alerts = []

ledger = st.session_state.ledger
budget_service = BudgetService(month_match=settings.month_match)

st.sidebar.markdown("### 💰 Expense & Savings Tracker")
st.sidebar.caption(f"Data file: {settings.data_file}")
menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "📂 Categories", "🎯 Budgets", "📥 Import / Export"]
)

if menu == "🏠 Overview":
    month = month_or_current(st.text_input("Month (YYYY-MM)", value=current_month()))
    analysis = spending_analysis(ledger, month, budget_service)

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Total Income", money(analysis.income))
    k2.metric("Total Expenses", money(analysis.expenses))
    k3.metric("Available Balance", money(analysis.balance))
    k4.metric("Expense Percentage", f"{analysis.expense_percentage:.1f}%")

    icon = TIER_ICONS[analysis.tier]
    text = f"{icon} **{analysis.tier.value}**: {TIER_MESSAGES[analysis.tier]}"
    if analysis.tier is Tier.CRITICAL:
        st.error(text)
    elif analysis.tier in (Tier.WARNING, Tier.ALERT):
        st.warning(text)
    else:
        st.success(text)

    st.subheader("💰 Savings Analysis")
    s1, s2, s3 = st.columns(3)
    s1.metric("Recommended Savings (20%)", money(analysis.recommended_savings))
    s2.metric("Current Savings", money(analysis.actual_savings))
    s3.metric("Gap to Goal", money(analysis.savings_gap))
    if analysis.savings_gap == 0:
        st.success("🎉 You're meeting your savings goal!")
    else:
        st.info(f"💡 Try to save {money(analysis.savings_gap)} more to reach a 20% savings rate.")

    over = analysis.budget["result"].get("over_budget", [])
    if over:
        st.error(f"🚨 Over budget in {month}: {', '.join(over)}")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    st.subheader("➕ Add Transaction")
    with st.form("add_transaction", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            kind = st.selectbox("Type", [k.value for k in Kind])
            amount = st.text_input("Amount", value="")
            date = st.text_input("Date (leave empty for today)", value="")
        with col2:
            category = st.text_input("Category")
            description = st.text_input("Description")
        submitted = st.form_submit_button("Add Transaction")

    if submitted:
        try:
            t = ledger.add_transaction(
                date or datetime.now().strftime("%Y-%m-%d"), description, amount, category, kind
            )
        except (InvalidAmount, InvalidKind) as e:
            st.error(f"❌ {e}")
        else:
            persist(ledger)
            results = event_bus.publish(
                TRANSACTION_ADDED,
                {"transaction": t, "ledger": ledger, "month": current_month(), "month_match": settings.month_match},
            )
            for result in results:
                if "alert" in result:
                    st.session_state.alerts.append({
                        "time": pd.Timestamp.now().strftime("%H:%M:%S"),
                        "message": result["alert"],
                    })
                    st.warning(f"{TIER_ICONS[result['tier']]} {result['alert']}")
                elif "percentage" in result:
                    st.info(f"📊 '{result['category']}' spending: {money(result['spent'])} / "
                            f"{money(result['limit'])} ({result['percentage']:.1f}%)")
            st.success(f"✅ {t.kind.value.capitalize()} of {money(t.amount)} recorded.")

    st.divider()
    st.subheader(f"📋 All Transactions ({len(ledger.transactions)} total)")
    if ledger.transactions:
        df = pd.DataFrame([
            {"Date": t.date, "Description": t.description, "Amount": float(t.amount),
             "Category": t.category, "Type": t.kind.value}
            for t in ledger.transactions
        ])
        st.dataframe(df, use_container_width=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="transactions.csv")
    else:
        st.info("No transactions found.")

    if st.session_state.alerts:
        st.subheader("⚠️ Recent Budget Alerts")
        for alert in reversed(st.session_state.alerts[-10:]):
            st.write(f"[{alert['time']}] {alert['message']}")
        if st.button("Clear Alerts"):
            st.session_state.alerts = []
            st.rerun()

elif menu == "📂 Categories":
    st.title("📂 Category Analysis")
    report = ReportService().category_report(ledger)

    col_inc, col_exp = st.columns(2)
    with col_inc:
        st.subheader("💰 Income by Category")
        if report["income"]:
            df_inc = pd.DataFrame([
                {"Category": r["category"], "Amount": float(r["amount"]), "Percentage": round(float(r["percentage"]), 1)}
                for r in report["income"]
            ])
            st.table(df_inc)
            st.plotly_chart(px.pie(df_inc, values="Amount", names="Category"), use_container_width=True)
        else:
            st.info("No income recorded")

    with col_exp:
        st.subheader("💸 Expenses by Category")
        if report["expenses"]:
            df_exp = pd.DataFrame([
                {"Category": r["category"], "Amount": float(r["amount"]),
                 "Percentage": round(float(r["percentage"]), 1), "Share": r["share"].value}
                for r in report["expenses"]
            ])
            st.table(df_exp)
            fig = px.bar(df_exp, x="Category", y="Amount", color="Share", template="plotly_dark")
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No expenses recorded")

    top = report["top_expense"]
    if top.is_some():
        name, amount = top.get_or_else(None)
        share = report["top_expense_share"].get_or_else(Decimal("0"))
        st.info(f"💡 '{name}' is your highest expense category ({money(amount)}, {share:.1f}% of expenses)")

elif menu == "🎯 Budgets":
    st.title("🎯 Budget Limits")

    with st.form("set_budget", clear_on_submit=True):
        category = st.text_input("Category")
        limit = st.text_input("Monthly limit")
        submitted = st.form_submit_button("Set Limit")
    if submitted:
        try:
            previous = ledger.set_budget_limit(category, limit)
        except InvalidAmount as e:
            st.error(f"❌ {e}")
        else:
            persist(ledger)
            new_limit = ledger.budget_limit(category)
            if previous is None:
                st.success(f"Budget limit set for '{category}': {money(new_limit)} per month")
            else:
                st.success(f"Budget limit for '{category}' updated from {money(previous)} to {money(new_limit)}")

    month = month_or_current(st.text_input("Month (YYYY-MM)", value=current_month(), key="budget_month"))
    rows = budget_rows(budget_service.monthly_report(month, ledger))
    if not rows:
        st.info("📊 No budget limits set.")
    else:
        df_b = pd.DataFrame([
            {"Category": r.category, "Spent": float(r.spent), "Budget": float(r.limit),
             "Remaining": float(r.remaining), "Status": f"{TIER_ICONS[r.tier]} {r.tier.value}"}
            for r in rows
        ])
        st.table(df_b)
        for r in rows:
            st.write(f"**{r.category}**: {money(r.spent)} / {money(r.limit)}")
            st.progress(min(1.0, float(r.percentage) / 100))
        if any(r.tier is Tier.OVER_BUDGET for r in rows):
            st.error("🚨 You have exceeded budget limits in some categories!")

elif menu == "📥 Import / Export":
    st.title("📥 Import / Export")

    st.subheader("Load from CSV")
    st.caption("Expected format: Date,Description,Amount,Category,Type")
    import_path = st.text_input("File to import")
    if st.button("Import") and import_path:
        try:
            result = import_transactions(ledger, import_path)
        except FileUnavailable as e:
            st.error(f"Could not open file: {e}")
        else:
            persist(ledger)
            st.success(f"Loaded {result.succeeded} transactions from '{import_path}' ({result.skipped} skipped)")

    st.divider()
    st.subheader("Export to CSV")
    export_path = st.text_input("Export filename", value="export.csv")
    if st.button("Export") and export_path:
        try:
            export_transactions(export_path, ledger)
        except FileUnavailable as e:
            st.error(f"Could not create export file: {e}")
        else:
            st.success(f"✅ Exported {len(ledger.transactions)} transactions and summary to '{export_path}'")
