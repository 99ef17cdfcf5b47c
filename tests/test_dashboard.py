from datetime import datetime, timedelta
from decimal import Decimal

from budget_tracker.dashboard import (
    build_dashboard,
    build_report,
    compose_dashboard,
    compose_report,
)
from budget_tracker.payloads import dashboard_payload, report_payload
from budget_tracker.seed import seed_demo_data
from budget_tracker.windows import WindowKind

NOW = datetime(2025, 10, 19, 12, 0)


def _scenario(make_tx, make_budget):
    txs = [
        make_tx("3240", datetime(2025, 9, 19, 12, 0), is_expense=False, category="Salary"),
        make_tx("84.20", NOW, category="Food & Dining"),
        make_tx("56.80", NOW - timedelta(days=3), category="Food & Dining"),
    ]
    budgets = [make_budget("Food & Dining", 500)]
    return txs, budgets


def test_food_and_dining_scenario(make_tx, make_budget):
    txs, budgets = _scenario(make_tx, make_budget)
    summary = compose_dashboard(txs, budgets, NOW)

    assert summary.category_expenses["Food & Dining"] == Decimal("141.00")
    status = summary.budget_status[0]
    assert status.budgeted == Decimal("500")
    assert status.spent == Decimal("141.00")
    assert status.percentage == 28
    assert status.is_over_budget is False

    assert summary.total_income == Decimal("3240")
    assert summary.total_expenses == Decimal("141.00")
    assert summary.current_balance == Decimal("3099.00")
    assert summary.monthly_income == Decimal("0")
    assert summary.monthly_expenses == Decimal("141.00")
    assert summary.budget_total == Decimal("500")
    assert summary.budget_used == 28


def test_zero_budgets_report_zero_usage(make_tx):
    summary = compose_dashboard([make_tx("20", NOW)], [], NOW)
    assert summary.budget_used == 0
    assert summary.budget_total == Decimal("0")
    assert summary.budget_status == []


def test_budget_used_is_capped(make_tx, make_budget):
    summary = compose_dashboard(
        [make_tx("900", NOW, category="Travel")], [make_budget("Travel", 300)], NOW
    )
    assert summary.budget_used == 100
    assert summary.budget_status[0].percent_over == 200


def test_duplicate_budgets_are_summed_into_total(make_tx, make_budget):
    budgets = [make_budget("Shopping", 400), make_budget("Shopping", 100)]
    summary = compose_dashboard([make_tx("250", NOW, category="Shopping")], budgets, NOW)
    assert summary.budget_total == Decimal("500")
    assert summary.budget_used == 50
    assert len(summary.budget_status) == 2


def test_category_expenses_ignore_window(make_tx, make_budget):
    old = make_tx("75", datetime(2023, 1, 1), category="Travel")
    summary = compose_dashboard([old], [make_budget("Travel", 100)], NOW)
    assert summary.monthly_expenses == Decimal("0")
    assert summary.category_expenses == {"Travel": Decimal("75")}
    assert summary.budget_status[0].spent == Decimal("75")


def test_recent_transactions_sorted_and_stable(make_tx):
    same_day = datetime(2025, 10, 10)
    txs = [
        make_tx("1", datetime(2025, 10, 1)),
        make_tx("2", same_day),
        make_tx("3", datetime(2025, 10, 15)),
        make_tx("4", same_day),
        make_tx("5", datetime(2025, 9, 1)),
        make_tx("6", same_day),
        make_tx("7", datetime(2025, 10, 12)),
    ]
    first = compose_dashboard(txs, [], NOW).recent_transactions
    second = compose_dashboard(txs, [], NOW).recent_transactions

    assert [tx.id for tx in first] == [3, 7, 2, 4, 6]
    assert first == second


def test_recent_transactions_shorter_than_limit(make_tx):
    txs = [make_tx("1", datetime(2025, 10, 1)), make_tx("2", datetime(2025, 10, 2))]
    recent = compose_dashboard(txs, [], NOW).recent_transactions
    assert [tx.id for tx in recent] == [2, 1]


def test_dashboard_payload_shape(make_tx, make_budget):
    txs, budgets = _scenario(make_tx, make_budget)
    payload = dashboard_payload(compose_dashboard(txs, budgets, NOW))

    assert set(payload) == {
        "currentBalance",
        "totalIncome",
        "totalExpenses",
        "monthlyIncome",
        "monthlyExpenses",
        "budgetUsed",
        "budgetTotal",
        "categoryExpenses",
        "budgetStatus",
        "recentTransactions",
    }
    assert payload["categoryExpenses"] == {"Food & Dining": 141.0}
    assert payload["budgetStatus"] == [
        {
            "category": "Food & Dining",
            "budgeted": 500.0,
            "spent": 141.0,
            "percentage": 28,
            "isOverBudget": False,
        }
    ]
    assert payload["recentTransactions"][0]["amount"] == 84.2


def test_report_for_current_month(make_tx, make_budget):
    txs = [
        make_tx("2000", datetime(2025, 10, 1), is_expense=False, category="Salary"),
        make_tx("500", datetime(2025, 10, 2), is_expense=False, category="Freelance"),
        make_tx("600", datetime(2025, 10, 3), category="Shopping"),
        make_tx("150", datetime(2025, 10, 4), category="Travel"),
        make_tx("999", datetime(2025, 9, 4), category="Travel"),
    ]
    report = compose_report(txs, [make_budget("Shopping", 500)], WindowKind.CURRENT_MONTH, NOW)

    assert report.label == "October"
    assert report.total_income == Decimal("2500")
    assert report.total_expenses == Decimal("750")
    assert report.net_savings == Decimal("1750")
    assert report.net_savings_percentage == 70
    assert report.expense_breakdown == [
        ("Shopping", Decimal("600")),
        ("Travel", Decimal("150")),
    ]
    progress = report.budget_progress[0]
    assert progress.percentage == 100
    assert progress.percent_over == 20

    payload = report_payload(report)
    assert payload["expensesByCategory"][0] == {"category": "Shopping", "amount": 600.0, "share": 80}
    assert payload["budgetProgress"][0]["percentOver"] == 20


def test_report_without_income_has_no_savings_percentage(make_tx):
    report = compose_report([make_tx("40", NOW)], [], WindowKind.LAST_30_DAYS, NOW)
    assert report.total_income == Decimal("0")
    assert report.net_savings == Decimal("-40")
    assert report.net_savings_percentage is None
    assert report_payload(report)["netSavingsPercentage"] is None


def test_build_dashboard_reads_owner_records(memory_store):
    user = seed_demo_data(memory_store, NOW)
    other = memory_store.create_user("someone", "pw")
    memory_store.create_transaction(
        other.id, amount="999", description="Other owner", category="Travel",
        date=NOW, is_expense=True,
    )

    summary = build_dashboard(memory_store, user.id, NOW)
    assert summary.total_income == Decimal("3240.00")
    assert summary.total_expenses == Decimal("350.19")
    assert summary.monthly_income == Decimal("0")
    assert summary.budget_total == Decimal("1700")
    assert "Travel" not in summary.category_expenses
    assert len(summary.recent_transactions) == 5
    assert summary.recent_transactions[0].description == "Grocery Shopping"

    report = build_report(memory_store, user.id, "last-year", NOW)
    assert report.total_income == Decimal("3240.00")
