"""Render records and summaries as JSON-ready dicts for the UI."""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from budget_tracker.budgets import percent_of
from budget_tracker.core.models import (
    Budget,
    BudgetStatus,
    DailyCashFlow,
    DashboardSummary,
    Report,
    Transaction,
)


def money(value: Decimal) -> float:
    return float(value)


def transaction_payload(tx: Transaction) -> Dict[str, object]:
    return {
        "id": tx.id,
        "amount": money(tx.amount),
        "description": tx.description,
        "category": tx.category,
        "date": tx.date.isoformat(),
        "isExpense": tx.is_expense,
        "userId": tx.owner_id,
        "createdAt": tx.created_at.isoformat(),
    }


def budget_payload(budget: Budget) -> Dict[str, object]:
    return {
        "id": budget.id,
        "category": budget.category,
        "amount": money(budget.amount),
        "userId": budget.owner_id,
        "period": budget.period.value,
        "createdAt": budget.created_at.isoformat(),
    }


def budget_status_payload(status: BudgetStatus) -> Dict[str, object]:
    return {
        "category": status.category,
        "budgeted": money(status.budgeted),
        "spent": money(status.spent),
        "percentage": status.percentage,
        "isOverBudget": status.is_over_budget,
    }


def dashboard_payload(summary: DashboardSummary) -> Dict[str, object]:
    return {
        "currentBalance": money(summary.current_balance),
        "totalIncome": money(summary.total_income),
        "totalExpenses": money(summary.total_expenses),
        "monthlyIncome": money(summary.monthly_income),
        "monthlyExpenses": money(summary.monthly_expenses),
        "budgetUsed": summary.budget_used,
        "budgetTotal": money(summary.budget_total),
        "categoryExpenses": {
            category: money(amount)
            for category, amount in summary.category_expenses.items()
        },
        "budgetStatus": [budget_status_payload(s) for s in summary.budget_status],
        "recentTransactions": [
            transaction_payload(tx) for tx in summary.recent_transactions
        ],
    }


def _breakdown_payload(
    breakdown: Sequence[Tuple[str, Decimal]], total: Decimal
) -> List[Dict[str, object]]:
    return [
        {
            "category": category,
            "amount": money(amount),
            "share": percent_of(amount, total) if total else 0,
        }
        for category, amount in breakdown
    ]


def report_payload(report: Report) -> Dict[str, object]:
    progress = []
    for status in report.budget_progress:
        entry = budget_status_payload(status)
        entry["id"] = status.budget_id
        entry["percentOver"] = status.percent_over
        progress.append(entry)
    return {
        "window": report.window,
        "label": report.label,
        "totalIncome": money(report.total_income),
        "totalExpenses": money(report.total_expenses),
        "netSavings": money(report.net_savings),
        "netSavingsPercentage": report.net_savings_percentage,
        "expensesByCategory": _breakdown_payload(
            report.expense_breakdown, report.total_expenses
        ),
        "incomeByCategory": _breakdown_payload(
            report.income_breakdown, report.total_income
        ),
        "budgetProgress": progress,
    }


def cash_flow_payload(series: Sequence[DailyCashFlow]) -> List[Dict[str, object]]:
    return [
        {
            "date": point.day.isoformat(),
            "income": money(point.income),
            "expenses": money(point.expenses),
        }
        for point in series
    ]
